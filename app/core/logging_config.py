"""
logging_config.py

애플리케이션 로깅 설정 파일.

root 로거에 콘솔 핸들러와 (선택) 파일 핸들러를 붙인다.
로그 포맷은 시각 / 레벨 / 로거 이름 / 메시지 순서.

설계 원칙:
- 로깅 설정은 앱 생성 시 한 번만 수행
- 각 모듈은 logging.getLogger(__name__) 으로 자신의 로거를 사용

관련 파일:
- app.core.config        : LOG_LEVEL / LOG_FILE 설정
- app.main               : 앱 시작 시 setup_logging 호출

"""

import logging
from pathlib import Path
from typing import Optional


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    logger = logging.getLogger()
    # 테스트 등에서 여러 번 import 되는 경우 중복 설정 방지
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
