from __future__ import annotations

from flask import Blueprint, jsonify, request

from ..config import load_settings
from ..errors import ConflictError, EmptyInputError
from ..schemas import AnalysisResponse, AnalyzeRequest, AnalyzeScrapedRequest, parse_payload
from ..services.analysis import analyze_numbers, sequence_from_draws
from ..services.jobs import get_job_controller

bp = Blueprint("analysis", __name__)


@bp.post("")
def analyze():
    payload = request.get_json(force=True, silent=True)
    data = parse_payload(AnalyzeRequest, payload)

    result = analyze_numbers(data.numbers, load_settings().analysis)
    return jsonify(AnalysisResponse(**result.to_dict()).model_dump())


@bp.post("/scraped")
def analyze_scraped():
    payload = request.get_json(force=True, silent=True)
    data = parse_payload(AnalyzeScrapedRequest, {} if payload is None else payload)

    snapshot = get_job_controller().status()
    if snapshot.is_running:
        raise ConflictError("A scraper is still running; wait for it to finish before analysing.")
    if not snapshot.results:
        raise EmptyInputError("No scraped draws are available; run a scrape first.")

    numbers = sequence_from_draws(snapshot.results, data.field)
    result = analyze_numbers(numbers, load_settings().analysis)
    return jsonify(AnalysisResponse(**result.to_dict()).model_dump())
