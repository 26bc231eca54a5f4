from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Student Records Administration API"
    database_url: str = "sqlite:///./students.db"
    sql_echo: bool = False
    log_level: str = "INFO"
    default_page_size: int = 10
    max_page_size: int = 100
    export_filename_prefix: str = "students"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
