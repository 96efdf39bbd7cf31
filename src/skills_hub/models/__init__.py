"""Data models for skills-hub.

Import from submodules:
- app_type: AppType
- provider: ProviderRecord, ProviderBackupEntry, UniversalProviderRecord, SwitchResult
- kit: SyncMode, KitPolicyRecord, KitLoadoutRecord, KitRecord, KitApplyResult
- skill: SkillLocation, SkillRecord, SkillDocument
- config: AgentConfig, AppConfig
- state: HubState
"""
