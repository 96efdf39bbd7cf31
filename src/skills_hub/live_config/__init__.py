"""Live configuration of the managed CLI tools.

Import from submodules:
- documents: typed live documents and provider-document conversions
- env_file: KEY=VALUE text parsing and serialization
- merge: merge and validation rules per tool
- store: ConfigStore ABC and implementations
"""
