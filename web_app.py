"""Flask Web 接口 - 疲劳驾驶监测系统"""

import logging
from dataclasses import asdict

from flask import Flask, jsonify, request

from detectors.camera_provider import CameraError
from monitor.monitor import DrowsinessMonitor

logger = logging.getLogger(__name__)


def create_app(monitor: DrowsinessMonitor) -> Flask:
    app = Flask(__name__)

    # ---- Flask 路由 ----

    @app.route("/api/start", methods=["POST"])
    def api_start():
        try:
            monitor.start()
        except CameraError as e:
            logger.error("启动失败: %s", e)
            return jsonify({"success": False, "message": str(e)})
        return jsonify({"success": True, "message": "监测已启动"})

    @app.route("/api/stop", methods=["POST"])
    def api_stop():
        monitor.stop()
        return jsonify({"success": True, "message": "监测已停止"})

    @app.route("/api/dismiss", methods=["POST"])
    def api_dismiss():
        monitor.dismiss()
        return jsonify({"success": True, "message": "警报已解除"})

    @app.route("/api/data")
    def api_data():
        return jsonify(monitor.get_data())

    @app.route("/api/history")
    def api_history():
        return jsonify({"history": monitor.get_history()})

    @app.route("/api/events", methods=["GET"])
    def api_events():
        return jsonify({"events": monitor.list_events()})

    @app.route("/api/events", methods=["DELETE"])
    def api_clear_events():
        monitor.clear_events()
        return jsonify({"success": True, "message": "事件记录已清空"})

    @app.route("/api/config", methods=["POST"])
    def api_config():
        data = request.get_json(force=True, silent=True)
        if not isinstance(data, dict):
            return jsonify({"success": False, "message": "请求体必须是 JSON 对象"}), 400
        config = monitor.update_config(data)
        return jsonify({"success": True, "message": "配置已更新", "config": asdict(config)})

    return app
