import os


def _env_bool(name: str, default: str = '0') -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev_secret_key")
    JSON_AS_ASCII = False

    # ZATCA seller identity (QR tags 1 and 2)
    ZATCA_SELLER_NAME = os.getenv('ZATCA_SELLER_NAME', 'CLUNY CAFE')
    ZATCA_SELLER_NAME_EN = os.getenv('ZATCA_SELLER_NAME_EN', 'CLUNY CAFE')
    ZATCA_VAT_NUMBER = os.getenv('ZATCA_VAT_NUMBER', '311234567890003')
    ZATCA_CR_NUMBER = os.getenv('ZATCA_CR_NUMBER', '')
    VAT_RATE = os.getenv('VAT_RATE', '0.15')

    # Branch shown on the tax invoice when the order carries none
    BRANCH_NAME = os.getenv('BRANCH_NAME', 'الفرع الرئيسي')
    BRANCH_ADDRESS = os.getenv('BRANCH_ADDRESS', 'الرياض، المملكة العربية السعودية')

    # Tracking links encoded in receipt QR codes
    TRACKING_BASE_URL = os.getenv('TRACKING_BASE_URL', 'http://127.0.0.1:5000')

    # Print defaults
    PRINT_TIMEZONE = os.getenv('PRINT_TIMEZONE', 'Asia/Riyadh')
    PRINT_CURRENCY = os.getenv('PRINT_CURRENCY', 'ر.س')
    PRINT_PAPER_WIDTH = os.getenv('PRINT_PAPER_WIDTH', '80mm')
    PRINT_AUTO_PRINT = _env_bool('PRINT_AUTO_PRINT', '1')
    PRINT_AUTO_CLOSE = _env_bool('PRINT_AUTO_CLOSE', '0')
    PRINT_SHOW_BUTTONS = _env_bool('PRINT_SHOW_BUTTONS', '1')
    PRINT_QR_ENABLED = _env_bool('PRINT_QR_ENABLED', '1')
    # Empty value drops the web-font @import (offline printers)
    PRINT_FONT_CSS_URL = os.getenv(
        'PRINT_FONT_CSS_URL',
        'https://fonts.googleapis.com/css2?family=Cairo:wght@400;600;700&display=swap',
    )
    # 'headless' keeps server-side prints in memory, 'browser' opens the local browser
    PRINT_PRESENTER = os.getenv('PRINT_PRESENTER', 'headless')
    # headless mode keeps only the most recent documents in memory (0 = no limit)
    PRINT_HEADLESS_KEEP = int(os.getenv('PRINT_HEADLESS_KEEP', '50'))

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    LOG_FILE = os.getenv('LOG_FILE', 'app.log')


class TestingConfig(Config):
    TESTING = True
    PRINT_HEADLESS_KEEP = 20
    PRINT_FONT_CSS_URL = ''
    PRINT_PRESENTER = 'headless'
    LOG_FILE = os.getenv('TEST_LOG_FILE', os.path.join(os.getenv('TMPDIR', '/tmp'), 'cafe-print-tests.log'))
