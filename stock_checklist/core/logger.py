"""
로깅 서비스

loguru 기반. 모듈 이름과 평가 문맥(checklist_id, symbol)을 extra 로 묶는다.

싱크 구성:
- 콘솔 (stderr)
- checklist.log: 전체 로그
- evaluation.log: checklist_id 가 바인딩된 실행/배치 로그만
- error.log: ERROR 이상
"""
import sys
from pathlib import Path
from typing import Any

from loguru import logger

from stock_checklist.core.exceptions import ConfigError

DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

EVALUATION_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | "
    "checklist={extra[checklist_id]} | {message}"
)


def _has_checklist(record: dict) -> bool:
    return record["extra"].get("checklist_id") is not None


class LoggerService:
    """
    로깅 서비스

    사용법:
        from stock_checklist.core.logger import get_logger

        logger = get_logger(__name__)
        logger.info("평가 시작")

        run_logger = get_logger("ChecklistRunner", checklist_id=3)
        run_logger.info("3개 종목 평가 완료")   # evaluation.log 에도 기록
    """

    _configured: bool = False

    @classmethod
    def configure(
        cls,
        level: str = "INFO",
        log_dir: str = "./logs",
        log_format: str | None = None,
        file_enabled: bool = True,
        rotation: str = "10 MB",
        retention: str = "7 days",
        colorize: bool = True,
    ) -> None:
        """
        로거 설정 (한 번만 적용, 다시 하려면 reset)

        Args:
            level: 로그 레벨
            log_dir: 로그 파일 디렉토리
            log_format: 콘솔/전체 로그 포맷 (None이면 DEFAULT_FORMAT)
            file_enabled: 파일 싱크 사용 여부
            rotation: 로테이션 크기
            retention: 보관 기간
            colorize: 콘솔 색상 (운영 환경에서는 끔)
        """
        if cls._configured:
            return

        logger.remove()
        logger.configure(extra={"name": "stock_checklist", "checklist_id": None})

        log_format = log_format or DEFAULT_FORMAT
        logger.add(sys.stderr, format=log_format, level=level, colorize=colorize)

        if file_enabled:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)
            file_options = {
                "rotation": rotation,
                "retention": retention,
                "compression": "zip",
                "encoding": "utf-8",
            }

            logger.add(log_path / "checklist.log", format=log_format, level=level, **file_options)
            logger.add(
                log_path / "evaluation.log",
                format=EVALUATION_FORMAT,
                level=level,
                filter=_has_checklist,
                **file_options,
            )
            logger.add(log_path / "error.log", format=log_format, level="ERROR", **file_options)

        cls._configured = True

    @classmethod
    def reset(cls) -> None:
        """설정 리셋 (테스트용)"""
        logger.remove()
        cls._configured = False


def get_logger(name: str, **context: Any) -> Any:
    """
    이름(과 평가 문맥)이 바인딩된 loguru 로거

    Args:
        name: 모듈/클래스 이름
        **context: checklist_id, symbol 등 추가 문맥
    """
    return logger.bind(name=name, **context)


def setup_logger_from_config() -> None:
    """설정 파일 기반 로거 초기화. 설정을 못 읽으면 기본값"""
    try:
        from stock_checklist.core.config import get_config

        config = get_config()
    except ConfigError:
        LoggerService.configure()
        return

    logging_config = config.get_section("logging")
    file_config = logging_config.get("file", {})
    LoggerService.configure(
        level=logging_config.get("level", "INFO"),
        log_dir=logging_config.get("log_dir", "./logs"),
        log_format=logging_config.get("format"),
        file_enabled=file_config.get("enabled", True),
        rotation=file_config.get("rotation", "10 MB"),
        retention=file_config.get("retention", "7 days"),
        colorize=not config.is_production,
    )
