"""
模块职责
- 提供 Web 入口（健康检查 / 启动生成 / 查询运行状态与日志），挂载在 `/api/sitemap` 前缀下；
- 查询参数沿用命令行选项名（url/depth/threads/gzip/...），布尔开关只要出现即视为开启；
- 运行在后台线程中执行，同一时间只允许一次运行。

组合根在模块级创建单例（事件总线、日志处理器、运行管理器），每次运行再按配置组装服务。
"""

from flask import Blueprint, jsonify, request

from ..domain.exceptions import RunInProgressError, UnauthorizedError
from ..domain.value_objects.crawl_config import CrawlConfig
from ..services.run_manager import SitemapRunManager
from .access import require_access_key
from .composition_root import build_event_pipeline, build_run_service

bp = Blueprint("sitemap", __name__, url_prefix="/api/sitemap")

_event_bus, _run_log = build_event_pipeline()
_manager = SitemapRunManager(
    lambda config: build_run_service(config, _event_bus, _run_log),
    on_discard=_run_log.discard_run
)


@bp.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok", "active_run": _manager.active_run_id})


@bp.route("/generate", methods=["GET", "POST"])
def generate():
    """启动一次站点地图生成（异步），返回 run_id"""
    options = request.args.to_dict()
    if request.method == "POST":
        options.update(request.get_json(silent=True) or {})

    try:
        require_access_key(options.pop("key", None))
    except UnauthorizedError as e:
        return jsonify({"error": e.message}), 401

    try:
        config = CrawlConfig.from_options(options)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    if not config.domains:
        return jsonify({"error": "Missing required url parameter."}), 400

    try:
        run_id = _manager.start(config)
    except RunInProgressError as e:
        return jsonify({"error": e.message, "run_id": e.run_id}), 409

    return jsonify({"status": "started", "run_id": run_id}), 202


@bp.route("/runs/<run_id>", methods=["GET"])
def run_status(run_id: str):
    # 运行状态 + 运行日志（?last_n=N 只返回最近 N 条）
    summary = _manager.get_run(run_id)
    if summary is None:
        return jsonify({"error": f"Unknown run: {run_id}"}), 404

    last_n = request.args.get("last_n", type=int)
    payload = summary.to_dict()
    payload["logs"] = _run_log.get_logs(run_id, last_n=last_n)
    return jsonify(payload)
