import structlog
import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Any, Dict, Optional

def setup_logging(log_level: str = "INFO", log_to_file: bool = False, log_dir: str = "logs"):
    """Setup structlog on top of standard logging"""

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if sys.stdout.isatty():
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    root_logger.addHandler(console_handler)

    if log_to_file:
        directory = Path(log_dir)
        directory.mkdir(exist_ok=True)
        today = datetime.now().strftime('%Y%m%d')
        file_handler = logging.FileHandler(
            directory / f"tradedesk_{today}.log",
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
        ))
        root_logger.addHandler(file_handler)

    # Suppress noisy loggers
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logging.getLogger(__name__).debug("Logging system initialized")

class SubmissionLogger:
    """Specialized logger for configuration submission events"""

    def __init__(self, name: str = "tradedesk.submission"):
        self.logger = structlog.get_logger(name)

    def submission_started(self, context: str, strategy: str, symbol: str,
                           instance_id: Optional[Any] = None):
        """Log a dispatched submission"""
        self.logger.info("Submission started",
                         context=context,
                         strategy=strategy,
                         symbol=symbol,
                         instance_id=instance_id)

    def submission_succeeded(self, context: str, strategy: str,
                             instance_id: Optional[Any] = None):
        """Log an accepted submission"""
        self.logger.info("Submission succeeded",
                         context=context,
                         strategy=strategy,
                         instance_id=instance_id)

    def submission_failed(self, context: str, strategy: str, detail: str,
                          status: Optional[int] = None):
        """Log a rejected submission"""
        self.logger.warning("Submission failed",
                            context=context,
                            strategy=strategy,
                            detail=detail,
                            status=status)

    def validation_blocked(self, strategy: str, errors: Dict[str, str]):
        """Log a submission stopped by local validation"""
        self.logger.info("Submission blocked by validation",
                         strategy=strategy,
                         fields=list(errors))
