#!/usr/bin/env python3
# web_server.py
"""
평가 알림 웹 서버 실행 스크립트

서버가 뜰 때 평가 알림 스케줄러도 함께 시작합니다.

사용법:
    python3 web/web_server.py

    또는

    python3 web/web_server.py --port 8080  # 다른 포트 사용
"""

import argparse
import sys
import os

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from notifier import config
from web.app import create_app


def main():
    parser = argparse.ArgumentParser(
        description="평가 알림 웹 서버",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
사용 예시:
  기본 실행 (PORT 환경 변수, 기본 5000):
    $ python3 web/web_server.py

  다른 포트 사용:
    $ python3 web/web_server.py --port 8080

  스케줄러 없이 실행:
    $ python3 web/web_server.py --no-scheduler
        """
    )

    parser.add_argument(
        '--port',
        type=int,
        default=config.PORT,
        help=f'웹 서버 포트 (기본: {config.PORT})'
    )

    parser.add_argument(
        '--host',
        type=str,
        default='0.0.0.0',
        help='웹 서버 호스트 (기본: 0.0.0.0)'
    )

    parser.add_argument(
        '--no-debug',
        action='store_true',
        help='디버그 모드 비활성화'
    )

    parser.add_argument(
        '--no-scheduler',
        action='store_true',
        help='평가 알림 스케줄러를 시작하지 않음'
    )

    args = parser.parse_args()
    config.setup_logging()

    scheduler = None
    if not args.no_scheduler:
        from notifier.scheduler import AssessmentScheduler
        scheduler = AssessmentScheduler()

    app = create_app(scheduler)

    print("=" * 60)
    print("📨 평가 알림 웹 서버")
    print("=" * 60)
    print()
    print(f"📍 URL: http://localhost:{args.port}")
    print(f"🩺 헬스 체크: http://localhost:{args.port}/health")
    print(f"📊 스케줄러 상태: http://localhost:{args.port}/api/scheduler/status")
    print()
    print("⚠️  주의: Ctrl+C로 종료하세요")
    print()

    try:
        if scheduler is not None:
            scheduler.start()
        # 리로더가 프로세스를 두 번 띄우면 스케줄러도 두 번 돈다
        app.run(
            debug=not args.no_debug,
            host=args.host,
            port=args.port,
            use_reloader=False
        )
    except KeyboardInterrupt:
        print("\n\n👋 웹 서버를 종료합니다")
    except Exception as e:
        print(f"\n❌ 오류 발생: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
    finally:
        if scheduler is not None:
            scheduler.stop()


if __name__ == "__main__":
    main()
