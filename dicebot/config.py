from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///./dicebot.db"
    environment: str = "local"
    debug: bool = True

    # Guild bot credentials; replies are discarded while either is empty.
    qq_bot_appid: str = ""
    qq_bot_token: str = ""
    qq_bot_sandbox: bool = False
    # Signs the op 13 callback handshake and verifies callback signatures.
    qq_bot_secret: str = ""

    api_base_url: str = "https://api.sgroup.qq.com"
    sandbox_api_base_url: str = "https://sandbox.api.sgroup.qq.com"
    api_timeout_seconds: float = 10.0

    # Raw received messages are written under <log_dir>/<intent>/.
    log_dir: str = "./logs"

    # Trigger character stripped from message text before dispatch.
    command_prefix: str = "."


settings = Settings()
