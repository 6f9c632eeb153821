"""疲劳驾驶监测系统入口文件"""

import argparse
import logging
import sys
import time

from alerts.alarm import create_alarm
from config import load_config
from detectors.camera_provider import CameraError, CameraLandmarkProvider
from monitor.monitor import DrowsinessMonitor
from storage.event_store import EventStore

logger = logging.getLogger(__name__)

# 无界面模式下输出检测快照的间隔（秒）
_STATUS_INTERVAL = 1.0


def build_monitor(args) -> DrowsinessMonitor:
    """根据命令行参数组装监测系统。"""
    config = load_config(args.config)
    event_store = EventStore(args.events_file, capacity=config.event_log_capacity)
    alarm = create_alarm(enabled=not args.no_audio)
    camera_index = args.camera
    return DrowsinessMonitor(
        provider_factory=lambda: CameraLandmarkProvider(camera_index),
        alarm=alarm,
        event_store=event_store,
        config=config,
    )


def run_headless(monitor: DrowsinessMonitor):
    """启动检测并定期输出状态，Ctrl+C 退出。"""
    try:
        monitor.start()
    except CameraError as e:
        logger.error("%s", e)
        sys.exit(1)

    last_version = None
    try:
        while True:
            time.sleep(_STATUS_INTERVAL)
            session = monitor.session
            if session is None:
                break
            if session.channel.version == last_version:
                continue
            last_version = session.channel.version
            if not session.channel.face_detected:
                logger.info("未检测到人脸")
                continue
            stats = session.channel.latest()
            if stats is not None:
                logger.info(
                    "EAR=%.2f MAR=%.2f 分数=%.1f 等级=%s",
                    stats.ear, stats.mar, stats.fatigue_score, stats.alert_level.value,
                )
    except KeyboardInterrupt:
        pass
    finally:
        monitor.stop()


def main(argv=None):
    parser = argparse.ArgumentParser(description="疲劳驾驶监测系统")
    parser.add_argument("--config", type=str, default=None, help="JSON 阈值配置文件路径")
    parser.add_argument("--camera", type=int, default=0, help="摄像头编号")
    parser.add_argument("--events-file", type=str, default="fatigue_events.json", help="疲劳事件记录文件")
    parser.add_argument("--no-audio", action="store_true", help="禁用警报声音")
    parser.add_argument("--web", action="store_true", help="启动 Web 接口")
    parser.add_argument("--host", type=str, default="0.0.0.0")
    parser.add_argument("--port", type=int, default=5000)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="日志级别",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    monitor = build_monitor(args)

    try:
        if args.web:
            from web_app import create_app
            app = create_app(monitor)
            try:
                app.run(host=args.host, port=args.port, debug=False, threaded=True)
            finally:
                monitor.stop()
        else:
            run_headless(monitor)
    finally:
        monitor.alarm.close()


if __name__ == "__main__":
    main()
