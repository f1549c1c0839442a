from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    fed_balance_sheet_csv: str = Field(default="data/walcl.csv", alias="FED_BALANCE_SHEET_CSV")
    tga_csv: str = Field(default="data/wtregen.csv", alias="TGA_CSV")
    rrp_csv: str = Field(default="data/rrpontsyd.csv", alias="RRP_CSV")
    pmi_csv: str = Field(default="data/napm.csv", alias="PMI_CSV")
    price_csv: str = Field(default="data/btc_prices.csv", alias="PRICE_CSV")

    index_timespan: str = Field(default="1Y", alias="INDEX_TIMESPAN")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=True, alias="LOG_JSON")


settings = Settings()
