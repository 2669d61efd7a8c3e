"""
Collaborator contracts (submission sink, definition source) and their Supabase adapters.

The adapters live in `form_engine.storage.supabase_store` and are imported
explicitly, so the pure engine modules never pull in the Supabase client.
"""

from .contracts import FormDefinitionSource, SubmissionSink  # noqa: F401
