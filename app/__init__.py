import os
from flask import Flask

from logging_config import setup_logging
from print_helper import init_print_helper
from services.print_dispatcher import BrowserPresenter, HeadlessPresenter, PrintOptions
from services.print_orchestrator import PrintOrchestrator, SynchronousScheduler, TimerScheduler


def create_app(config_class=None):
    app = Flask(__name__)

    # Load configuration (environment driven, see config.py)
    if config_class is None:
        from config import Config
        config_class = Config
    app.config.from_object(config_class)
    app.config.setdefault('SECRET_KEY', os.getenv('SECRET_KEY', os.urandom(24)))

    setup_logging(app.config.get('LOG_LEVEL', 'INFO'), app.config.get('LOG_FILE'))

    # ربط مولّد المطبوعات بالتطبيق
    renderer = init_print_helper(app)

    if app.config.get('PRINT_PRESENTER') == 'browser':
        presenter, scheduler = BrowserPresenter(), TimerScheduler()
    else:
        presenter = HeadlessPresenter(keep=app.config.get('PRINT_HEADLESS_KEEP') or None)
        scheduler = SynchronousScheduler()
    default_options = PrintOptions(
        paper_width=app.config.get('PRINT_PAPER_WIDTH', '80mm'),
        auto_print=app.config.get('PRINT_AUTO_PRINT', True),
        auto_close=app.config.get('PRINT_AUTO_CLOSE', False),
        show_print_button=app.config.get('PRINT_SHOW_BUTTONS', True),
    )
    app.extensions['print_orchestrator'] = PrintOrchestrator(renderer, presenter, scheduler, default_options)

    # تسجيل Blueprints
    from routes.print_receipt import bp as receipt_bp
    app.register_blueprint(receipt_bp)

    app.logger.info("Print service ready (presenter=%s)", type(presenter).__name__)
    return app
