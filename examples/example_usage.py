"""Ví dụ: dùng service layer (không qua Flask).

Đồng bộ điểm danh standup của một ngày lên Google Sheets, giống lệnh
``flask sync-attendance`` nhưng gọi thẳng container.
"""

import sys

from dotenv import load_dotenv

from src.nxtprof.nxtprof.container import build_container
from src.nxtprof.nxtprof.core.enums import SessionType
from src.nxtprof.nxtprof.main import load_settings


def main(day: str):
    load_dotenv(override=False)
    container = build_container(load_settings())
    print(container.attendance_sync.sync(day, SessionType.STANDUPS).to_dict())


if __name__ == "__main__":
    main(sys.argv[1])
