"""
Пакет skulabel
==============

Генерация SKU, штрихкодов Code 128 / QR и печатных этикеток товаров.

Этот пакет предоставляет:
    - Кодировщик Code 128 (набор B) с контрольной суммой mod 103
    - Растеризацию штрихкода в изображение Pillow / PNG / data URL
    - QR-код с JSON-описанием товара
    - Генерацию SKU вида ``PE/PJ02-2399-AGZKO``
    - HTML-шаблоны этикеток и печатный документ A4 / термопринтер

Пример базового использования:
    >>> from skulabel import encode, render_code128, get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> bits = encode("PE/PJ02-2399-AGZKO")
    >>> img = render_code128("PE/PJ02-2399-AGZKO", module_width=2, height=60)
    >>> logger.info("Штрихкод: %d модулей", len(bits))

Управление конфигурацией:
    >>> import os
    >>> os.environ['SKULABEL_LOG_LEVEL'] = 'DEBUG'
    >>>
    >>> from skulabel import load_config
    >>> config = load_config()
    >>> config["default_template"]
    'standard'

Автор: SKU Label Development Team
Версия: 0.1.0
Лицензия: MIT
Python: 3.11+
"""

import json
import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# =============================================================================
# МЕТАДАННЫЕ ВЕРСИИ
# =============================================================================

__version__ = "0.1.0"
__author__ = "SKU Label Development Team"
__description__ = "SKU generation, Code 128 / QR encoding and printable product labels"
__license__ = "MIT"
__python_requires__ = ">=3.11"

VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0

LOGGER_NAMESPACE = "skulabel"
LOG_LEVEL_ENV = "SKULABEL_LOG_LEVEL"

# =============================================================================
# КОНФИГУРАЦИЯ ЛОГИРОВАНИЯ
# =============================================================================


def _setup_logging() -> None:
    """
    Инициализировать логирование пакета.

    - stderr: WARNING и выше
    - logs/skulabel.log (ротация 10 МБ x 5): все уровни от SKULABEL_LOG_LEVEL

    Идемпотентна: если у логгера пакета уже есть обработчики, ничего не делает.
    """
    log_level_str = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    log_level = logging.getLevelName(log_level_str)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    root_logger = logging.getLogger(LOGGER_NAMESPACE)
    if root_logger.handlers:
        return

    root_logger.setLevel(log_level)

    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(levelname)-8s [%(name)s.%(funcName)s:%(lineno)d] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    try:
        log_dir = Path("logs")
        log_dir.mkdir(exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_dir / "skulabel.log",
            maxBytes=10 * 1024 * 1024,  # 10 МБ
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    except OSError as e:
        root_logger.warning(
            "Не удалось инициализировать файловое логирование: %s. "
            "Используется только консоль.",
            e,
        )

    root_logger.propagate = False


def get_logger(module_name: str) -> logging.Logger:
    """
    Получить логгер в пространстве имён ``skulabel``.

    Аргументы:
        module_name: Обычно ``__name__``.

    Возвращает:
        ``skulabel.<module_name>`` (или ``skulabel.main`` для ``__main__``).

    Пример:
        >>> get_logger("tools.import").name
        'skulabel.tools.import'
    """
    if module_name == LOGGER_NAMESPACE or module_name.startswith(LOGGER_NAMESPACE + "."):
        return logging.getLogger(module_name)
    if module_name == "__main__":
        return logging.getLogger(f"{LOGGER_NAMESPACE}.main")
    clean_name = module_name.lstrip(".")
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{clean_name}")


# =============================================================================
# УПРАВЛЕНИЕ КОНФИГУРАЦИЕЙ
# =============================================================================

_DEFAULT_CONFIG: Dict[str, Any] = {
    "log_level": "INFO",
    "default_format": "CODE128",
    "default_template": "standard",
    "label_width": 200,
    "label_height": 100,
    "font_size": 12,
    "company_name": "",
    "logo_url": "",
    "show_price": True,
    "show_sku": True,
    "show_category": False,
    "show_manufacturer": False,
    "show_logo": False,
    "background_color": "#FFFFFF",
    "text_color": "#000000",
    "border_color": "#CCCCCC",
    "output_dir": "labels",
    "manufacturer_codes": {},
    "manufacturer_codes_file": None,
}


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Загрузить конфигурацию из config.json поверх значений по умолчанию.

    Недопустимый JSON, не-объект или ошибка чтения логируются как
    предупреждение; в этом случае возвращаются значения по умолчанию.

    Аргументы:
        config_path: Путь к файлу. None -> ``config.json`` в текущем каталоге.

    Возвращает:
        Новый словарь со всеми ключами по умолчанию.

    Пример:
        >>> config = load_config(Path("shop.json"))
        >>> config["label_width"]
        200
    """
    logger = get_logger(__name__)

    if config_path is None:
        config_path = Path("config.json")
    config_path = Path(config_path)

    config = dict(_DEFAULT_CONFIG)
    config["manufacturer_codes"] = {}

    if not config_path.exists():
        logger.info(
            "Файл конфигурации %s не найден. Используется конфигурация по умолчанию.",
            config_path,
        )
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            user_config = json.load(f)

        if not isinstance(user_config, dict):
            raise ValueError(
                f"Файл конфигурации должен содержать JSON-объект, "
                f"получен {type(user_config).__name__}"
            )

        config.update(user_config)
        logger.info("Конфигурация загружена из %s", config_path)
        logger.debug("Конфигурация: %s", config)

    except json.JSONDecodeError as e:
        logger.warning(
            "Не удалось разобрать %s: недопустимый JSON в строке %d, столбце %d. "
            "Используется конфигурация по умолчанию.",
            config_path,
            e.lineno,
            e.colno,
        )
    except OSError as e:
        logger.warning(
            "Не удалось прочитать %s: %s. Используется конфигурация по умолчанию.",
            config_path,
            e,
        )
    except ValueError as e:
        logger.warning(
            "Недопустимый формат конфигурации: %s. Используется конфигурация по умолчанию.",
            e,
        )

    return config


def check_dependencies() -> Dict[str, bool]:
    """
    Проверить наличие сторонних зависимостей.

    Возвращает:
        {"pillow": bool, "qrcode": bool, "python-barcode": bool}
    """
    dependencies: Dict[str, bool] = {}
    for dist_name, module_name in (
        ("pillow", "PIL"),
        ("qrcode", "qrcode"),
        ("python-barcode", "barcode"),
    ):
        try:
            __import__(module_name)
            dependencies[dist_name] = True
        except ImportError:
            dependencies[dist_name] = False
    return dependencies


_setup_logging()

# =============================================================================
# ПУБЛИЧНЫЙ API
# =============================================================================

# Импорты после настройки логирования.
from .barcodegen.code128 import (  # noqa: E402
    Code128Error,
    InvalidInputError,
    UnsupportedCharacterError,
    encode,
    verify,
)
from .barcodegen.qr import render_qr  # noqa: E402
from .barcodegen.rasterizer import render_bits, render_code128  # noqa: E402
from .label.composer import compose_label, register_template  # noqa: E402
from .label.printing import (  # noqa: E402
    build_print_document,
    print_barcode_labels,
    print_qr_codes,
    quick_print_barcodes,
)
from .model.enums import BarcodeFormat, PrintTemplate  # noqa: E402
from .model.product import BarcodeData, LabelOptions, ProductPayload  # noqa: E402
from .sku.generator import build_sku, generate_barcodes  # noqa: E402
from .sku.lookup import MappingManufacturerLookup, lookup_from_config  # noqa: E402

__all__ = [
    # Метаданные версии
    "__version__",
    "__author__",
    "__description__",
    "__license__",
    "__python_requires__",
    "VERSION_MAJOR",
    "VERSION_MINOR",
    "VERSION_PATCH",
    # Утилиты
    "get_logger",
    "load_config",
    "check_dependencies",
    # Кодировщик
    "encode",
    "verify",
    "Code128Error",
    "InvalidInputError",
    "UnsupportedCharacterError",
    # Рендеринг
    "render_bits",
    "render_code128",
    "render_qr",
    # Модель
    "BarcodeFormat",
    "PrintTemplate",
    "BarcodeData",
    "LabelOptions",
    "ProductPayload",
    # SKU
    "build_sku",
    "generate_barcodes",
    "MappingManufacturerLookup",
    "lookup_from_config",
    # Этикетки
    "compose_label",
    "register_template",
    "build_print_document",
    "print_barcode_labels",
    "print_qr_codes",
    "quick_print_barcodes",
]
