import logging
import logging.handlers
import sys
from datetime import datetime, timezone
import json
from pathlib import Path

from redis_config_store.config.settings import get_settings

settings = get_settings()


class JsonFormatter(logging.Formatter):
    """JSON formatter cho structured logging"""
    
    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        
        # Extra fields attached by the store and publisher
        if hasattr(record, 'config_key'):
            log_entry['config_key'] = record.config_key
        if hasattr(record, 'channel'):
            log_entry['channel'] = record.channel
        if hasattr(record, 'publisher_id'):
            log_entry['publisher_id'] = record.publisher_id
        
        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)
        
        return json.dumps(log_entry, ensure_ascii=False)


class ColoredFormatter(logging.Formatter):
    """Colored formatter cho console output"""
    
    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m'       # Reset
    }
    
    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        reset = self.COLORS['RESET']
        
        timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
        
        return (
            f"{color}[{timestamp}] {record.levelname:8s}{reset} "
            f"{record.name:20s} | {record.getMessage()}"
        )


def _rotating_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter())
    return handler


def setup_logging() -> None:
    """Setup logging configuration"""
    
    level = logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(ColoredFormatter() if settings.DEBUG else JsonFormatter())
    root_logger.addHandler(console_handler)
    
    # File logs only when a directory is configured
    if settings.LOG_DIR:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(_rotating_handler(log_dir / "app.log", logging.INFO))
        root_logger.addHandler(_rotating_handler(log_dir / "error.log", logging.ERROR))
    
    # Third-party library loggers
    logging.getLogger("redis").setLevel(logging.WARNING)
    
    if not settings.DEBUG:
        logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get logger instance với tên cụ thể"""
    
    if not logging.getLogger().handlers:
        setup_logging()
    
    return logging.getLogger(name)
