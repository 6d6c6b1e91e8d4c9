# src/utils/logging_config.py
import logging
from pathlib import Path
from typing import Optional


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """
    루트 로거를 설정합니다. 콘솔 핸들러와, 지정된 경우 파일 핸들러를 추가합니다.

    이미 핸들러가 붙어 있으면 아무것도 하지 않으므로 여러 번 호출해도 안전합니다.

    Args:
        level: 로그 레벨 이름 (예: "DEBUG", "INFO"). 대소문자를 구분하지 않습니다.
        logfile: 로그를 기록할 파일 경로. 생략하면 파일 핸들러를 추가하지 않습니다.
    """
    logger = logging.getLogger()
    if logger.handlers:
        return

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logfile:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
