# web/app.py
"""
평가 알림 서비스 웹 앱

헬스 체크와 스케줄러 상태 조회만 제공합니다.
"""

from flask import Flask, jsonify

SERVICE_MESSAGE = "Tale Job Portal API is running"


def create_app(scheduler=None) -> Flask:
    """
    Flask 앱 생성

    Args:
        scheduler: 상태를 노출할 AssessmentScheduler (선택)
    """
    app = Flask(__name__)
    app.extensions['assessment_scheduler'] = scheduler

    @app.route('/health')
    @app.route('/api/health')
    def health():
        return jsonify({'status': 'OK', 'message': SERVICE_MESSAGE})

    @app.route('/api/scheduler/status')
    def scheduler_status():
        current = app.extensions.get('assessment_scheduler')
        if current is None:
            return jsonify({'success': False, 'message': 'Scheduler is not attached'}), 503
        return jsonify({'success': True, 'scheduler': current.get_status()})

    @app.errorhandler(404)
    def not_found(_error):
        return jsonify({'success': False, 'message': 'Route not found'}), 404

    return app
