"""skills-hub: Provider switching and skill kits for AI coding CLIs.

Import from submodules:
- version: __version__
- hub: SkillsHub facade used by the CLI
"""

from skills_hub.version import __version__ as __version__
