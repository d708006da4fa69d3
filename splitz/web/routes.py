"""Web API routes for Splitz."""

import json
import logging
import queue
import threading
import uuid
from pathlib import Path

from flask import Blueprint, Response, current_app, jsonify, request

from splitz.engine import process
from splitz.errors import InvalidJobError, SplitCancelledError, SplitzError
from splitz.manifest import DEFAULT_CLIP_DURATION, coerce_clip_duration, coerce_count, job_for
from splitz.planner import format_size, plan_clip_count

logger = logging.getLogger(__name__)

bp = Blueprint("api", __name__)

# In-memory job store: job_id -> job dict
_jobs: dict[str, dict] = {}


@bp.route("/api/tools")
def tools_status():
    tools = current_app.config["TOOLS"]
    return jsonify({"ffmpeg": tools.is_available()})


@bp.route("/api/probe", methods=["POST"])
def probe_file():
    data = request.get_json(silent=True) or {}
    path = str(data.get("path", "")).strip()
    if not path:
        raise InvalidJobError("No path provided")

    info = current_app.config["TOOLS"].probe(Path(path))
    resp = {
        "path": path,
        "duration": info.duration,
        "size": info.size,
        "size_label": format_size(info.size),
    }
    if data.get("duration") is not None:
        clip_duration = coerce_clip_duration(data["duration"])
        resp["clip_duration"] = clip_duration
        resp["clips"] = plan_clip_count(info.duration, clip_duration)
    return jsonify(resp)


@bp.route("/api/jobs", methods=["POST"])
def start_split():
    data = request.get_json(silent=True) or {}
    input_path = str(data.get("input_path", "")).strip()
    output_dir = str(data.get("output_dir", "")).strip()
    if not input_path:
        raise InvalidJobError("No input_path provided")

    job_spec = job_for(
        Path(input_path),
        clip_duration=data.get("duration", DEFAULT_CLIP_DURATION),
        output_dir=Path(output_dir) if output_dir else None,
        prefix=data.get("prefix"),
        suffix=data.get("suffix", ""),
        workers=coerce_count(data.get("workers", 1), "workers"),
        retries=coerce_count(data.get("retries", 0), "retries"),
    )

    job_id = uuid.uuid4().hex[:12]
    progress_queue: queue.Queue = queue.Queue()
    cancel = threading.Event()
    job = {
        "input_path": str(job_spec.input),
        "output_dir": str(job_spec.output_dir),
        "status": "splitting",
        "error": None,
        "progress": {"current_clip": 0, "total_clips": 0, "percentage": 0.0},
        "progress_queue": progress_queue,
        "cancel": cancel,
    }
    _jobs[job_id] = job
    tools = current_app.config["TOOLS"]

    def run():
        try:
            def on_progress(p):
                job["progress"] = {
                    "current_clip": p.current_clip,
                    "total_clips": p.total_clips,
                    "percentage": round(p.percentage, 1),
                }
                progress_queue.put(dict(job["progress"]))

            result = process(job_spec, tools=tools, on_progress=on_progress, cancel=cancel)
            job["result"] = {
                "total_clips": result.total_clips,
                "output_dir": str(result.output_dir),
                "clips": [p.name for p in result.clips],
                "skipped_tail": result.skipped_tail,
            }
            job["status"] = "done"
        except SplitCancelledError as e:
            job["status"] = "cancelled"
            job["error"] = str(e)
        except SplitzError as e:
            job["status"] = "error"
            job["error"] = str(e)
        except Exception as e:
            logger.exception("Split job %s failed", job_id)
            job["status"] = "error"
            job["error"] = str(e)
        finally:
            progress_queue.put(None)  # sentinel

    thread = threading.Thread(target=run, daemon=True)
    job["thread"] = thread
    thread.start()
    return jsonify({"job_id": job_id, "status": "started"})


@bp.route("/api/jobs/<job_id>/progress")
def progress_stream(job_id: str):
    if job_id not in _jobs:
        return jsonify({"error": "Job not found"}), 404

    job = _jobs[job_id]
    q = job["progress_queue"]

    def generate():
        while True:
            try:
                msg = q.get(timeout=120)
            except queue.Empty:
                yield "data: {\"error\": \"timeout\"}\n\n"
                break
            if msg is None:
                if job["status"] == "done":
                    data = json.dumps({"status": "done", "result": job.get("result")})
                else:
                    data = json.dumps({"status": job["status"], "error": job["error"]})
                yield f"data: {data}\n\n"
                break
            yield f"data: {json.dumps(msg)}\n\n"

    return Response(generate(), mimetype="text/event-stream")


@bp.route("/api/jobs/<job_id>/status")
def job_status(job_id: str):
    if job_id not in _jobs:
        return jsonify({"error": "Job not found"}), 404

    job = _jobs[job_id]
    resp = {
        "status": job["status"],
        "input_path": job["input_path"],
        "output_dir": job["output_dir"],
        "progress": job["progress"],
    }
    if job["status"] == "done":
        resp["result"] = job.get("result")
    if job["status"] in ("error", "cancelled"):
        resp["error"] = job["error"]
    return jsonify(resp)


@bp.route("/api/jobs/<job_id>/cancel", methods=["POST"])
def cancel_job(job_id: str):
    if job_id not in _jobs:
        return jsonify({"error": "Job not found"}), 404

    job = _jobs[job_id]
    if job["status"] != "splitting":
        return jsonify({"error": f"Job is already {job['status']}"}), 409

    job["cancel"].set()
    return jsonify({"status": "cancelling"})
