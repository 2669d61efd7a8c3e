"""
Registration form engine for the church admin events module.

- `form_engine.schemas`: form definition models (fields, sections, rules)
- `form_engine.form_building`: field catalog, factories, builder operations
- `form_engine.logic`: conditional visibility and validation rules
- `form_engine.wizard`: multi-step controller, repeatable rows, presets
- `form_engine.storage`: collaborator contracts and the Supabase adapter
"""
