#!/usr/bin/env python3
# scheduler_service.py
"""
평가 알림 스케줄러 서비스 실행 스크립트

사용법:
    # 프로덕션 모드 (5분마다 자동 실행)
    python3 scheduler_service.py

    # 테스트 모드 (즉시 1회 실행)
    python3 scheduler_service.py --test

    # 디버깅 모드 (30초마다 실행)
    python3 scheduler_service.py --interval 30
"""

import argparse
import sys
import os

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


def main():
    parser = argparse.ArgumentParser(
        description="평가 알림 스케줄러 서비스",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
예시:
  프로덕션 모드 (5분 간격):
    $ python3 scheduler_service.py

  테스트 모드 (즉시 실행):
    $ python3 scheduler_service.py --test

  디버깅 모드 (30초마다):
    $ python3 scheduler_service.py --interval 30

  백그라운드 실행:
    $ nohup python3 scheduler_service.py &
        """
    )

    parser.add_argument(
        '--test',
        action='store_true',
        help='테스트 모드 (즉시 1회 실행)'
    )

    parser.add_argument(
        '--interval',
        type=int,
        metavar='SECONDS',
        help='실행 간격 (초 단위, 디버깅용)'
    )

    args = parser.parse_args()

    from notifier import config
    from notifier.database import test_mongo_connection
    config.setup_logging()

    if not config.EMAIL_DRY_RUN and (not config.EMAIL_USER or not config.EMAIL_PASS):
        print("❌ 오류: EMAIL_USER / EMAIL_PASS 환경 변수가 설정되지 않았습니다.")
        print("   .env 파일에 추가하거나 EMAIL_DRY_RUN=1 로 실행하세요.")
        sys.exit(1)

    if not test_mongo_connection():
        print(f"⚠️  경고: MongoDB에 연결할 수 없습니다 ({config.MONGODB_URI}).")
        print("   다음 주기에 다시 시도합니다.\n")

    from notifier.scheduler import start_scheduler

    print("=" * 60)
    print("🚀 평가 알림 스케줄러 서비스")
    print("=" * 60)
    print()

    try:
        if args.test:
            result = start_scheduler(test=True)
            print(f"✅ 점검 결과: {result}")
        else:
            start_scheduler(daemon=True, interval=args.interval)
    except KeyboardInterrupt:
        print("\n\n👋 사용자가 중지했습니다.")
    except Exception as e:
        print(f"\n❌ 오류 발생: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
