from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from ..schemas import StartScrapeRequest, StartScrapeResponse, StatusResponse, parse_payload
from ..services.jobs import get_job_controller

bp = Blueprint("scrape", __name__)


@bp.post("/start-scrape")
def start_scrape():
    payload = request.get_json(force=True, silent=True)
    data = parse_payload(StartScrapeRequest, payload)

    get_job_controller().start(data.lotto_type)
    current_app.logger.info("Started scrape for %s", data.lotto_type.value)

    response = StartScrapeResponse(
        message=f"Scraping process for {data.lotto_type.label} started!",
        lotto_type=data.lotto_type.value,
    )
    return jsonify(response.model_dump()), 202


@bp.get("/status")
def get_status():
    snapshot = get_job_controller().status()
    response = StatusResponse(**snapshot.to_dict())
    return jsonify(response.model_dump())
