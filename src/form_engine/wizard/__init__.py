"""
Multi-step wizard: controller, repeatable collections, submission transforms, presets.
"""

from .collections import CollectionRow, RepeatableCollection  # noqa: F401
from .controller import SubmissionOutcome, WizardController, WizardStep  # noqa: F401
from .lookup import MemberLookup, MemberOption, MemberPage  # noqa: F401
