"""
Settings — конфигурация приложения из переменных окружения.

- LENS_DEFAULT_BRAND: бренд по умолчанию (fallback загрузчика)
- LENS_BRAND_DATA_DIR: каталог JSON-таблиц брендов
- LENS_LOG_LEVEL: уровень логирования
"""

import os
from pathlib import Path

from pydantic import BaseModel

BUNDLED_BRAND_DATA_DIR = Path(__file__).resolve().parent.parent / "brands" / "data"


class Settings(BaseModel):
    default_brand_id: str = os.getenv("LENS_DEFAULT_BRAND", "enterprise")
    brand_data_dir: Path = Path(os.getenv("LENS_BRAND_DATA_DIR", str(BUNDLED_BRAND_DATA_DIR)))
    log_level: str = os.getenv("LENS_LOG_LEVEL", "INFO")


settings = Settings()
