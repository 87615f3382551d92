import logging
import os
from logging.handlers import RotatingFileHandler


class Logger:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Logger, cls).__new__(cls)
            cls._instance._setup_logger()
        return cls._instance

    @staticmethod
    def _resolve_level(name):
        """Level number for a name like 'debug', INFO when the name is unknown."""
        level = logging.getLevelName(name.strip().upper())
        return level if isinstance(level, int) else logging.INFO

    def _setup_logger(self):
        self.logger = logging.getLogger('NordCtl')
        level_name = os.environ.get('NORDCTL_LOG_LEVEL', 'INFO')
        self.logger.setLevel(self._resolve_level(level_name))

        log_dir = os.environ.get(
            'NORDCTL_LOG_DIR',
            os.path.join(os.path.dirname(os.path.dirname(__file__)), 'logs'),
        )
        os.makedirs(log_dir, exist_ok=True)
        log_file = os.path.join(log_dir, 'nordctl.log')

        # Use RotatingFileHandler to limit log file size
        file_handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024,
                                           backupCount=3)
        formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(name)s:%(lineno)d - %(pathname)s - %(message)s')
        file_handler.setFormatter(formatter)

        self.logger.addHandler(file_handler)

        if self.logger.level == logging.INFO and level_name.strip().upper() != 'INFO':
            self.logger.warning(f"Unknown log level '{level_name}', using INFO")

    def get_logger(self):
        return self.logger


logger = Logger().get_logger()
