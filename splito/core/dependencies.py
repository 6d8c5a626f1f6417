from splito.core.config import Settings, settings

def get_settings() -> Settings:
    return settings
