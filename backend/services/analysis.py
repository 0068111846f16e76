"""Deterministic frequency and recency analysis over draw number sequences.

`analyze_numbers` is a pure function. It cleans an oldest-first sequence of
numeric strings, derives frequency statistics and recurrence patterns, and
ranks every distinct number with a fixed weighting of frequency rank and
recency rank. The ranking is a transparent heuristic: the same input always
produces the same output and every figure in the explanation can be traced
back to the summary sections.
"""
from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from scraper.types import DrawRecord

from ..errors import EmptyInputError

METHOD_LABEL = "Weighted Frequency & Recency Ranking"
DRAW_FIELDS = ("first_prize", "last_two_digits")

_NON_DIGIT = re.compile(r"[^0-9]")
# Widest number whose integer value is exact as a float.
MAX_NUMERIC_WIDTH = 15
NUMERIC_STATS = ("mean", "median", "std_dev", "variance", "min", "max")


@dataclass(frozen=True)
class AnalysisConfig:
    recency_window: int = 10
    trend_window: int = 5
    frequency_weight: float = 0.6
    recency_weight: float = 0.4
    max_alternatives: int = 4
    min_alternatives: int = 2
    reliable_sample_size: int = 10
    high_confidence_margin: float = 0.25
    medium_confidence_margin: float = 0.10


@dataclass(frozen=True)
class Candidate:
    number: str
    count: int
    gap: int
    frequency_rank: int
    recency_rank: int
    score: float


@dataclass(frozen=True)
class Prediction:
    prediction: str
    confidence: str
    method: str
    alternatives: Tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "prediction": self.prediction,
            "confidence": self.confidence,
            "method": self.method,
            "alternatives": list(self.alternatives),
        }


@dataclass(frozen=True)
class AnalysisResult:
    statistical_summary: Dict[str, Any]
    pattern_analysis: Dict[str, Any]
    prediction_output: Prediction
    detailed_explanation: Dict[str, str]

    def to_dict(self) -> dict:
        return {
            "statistical_summary": self.statistical_summary,
            "pattern_analysis": self.pattern_analysis,
            "prediction_output": self.prediction_output.to_dict(),
            "detailed_explanation": self.detailed_explanation,
        }


def clean_number(value: str) -> str:
    return _NON_DIGIT.sub("", value)


def clean_sequence(values: Iterable[str]) -> List[str]:
    cleaned = (clean_number(value) for value in values)
    return [value for value in cleaned if value]


def sequence_from_draws(draws: Sequence[DrawRecord], field: str = "first_prize") -> List[str]:
    """Build an oldest-first analysis input from newest-first scrape results."""
    if field not in DRAW_FIELDS:
        raise ValueError(f"Unknown draw field: {field}")
    raw = [getattr(draw, field) for draw in reversed(draws)]
    return clean_sequence(value for value in raw if value)


def analyze_numbers(numbers: Sequence[str], config: AnalysisConfig = AnalysisConfig()) -> AnalysisResult:
    cleaned = clean_sequence(numbers)
    if not cleaned:
        raise EmptyInputError("No usable numbers remain after removing non-digit characters.")

    frequency_table = _frequency_table(cleaned)
    gaps = _last_seen_gaps(cleaned)
    digit_ranking = _digit_frequency(cleaned)
    width = _dominant_width(cleaned)

    summary = _statistical_summary(cleaned, frequency_table)
    patterns = _pattern_analysis(cleaned, gaps, digit_ranking, width, config)

    candidates = _rank_candidates(frequency_table, gaps, config)
    top = candidates[0]
    runner_up = candidates[1] if len(candidates) > 1 else None
    margin = round(top.score - (runner_up.score if runner_up else 0.0), 4)

    alternatives = [c.number for c in candidates[1 : config.max_alternatives + 1]]
    filled = []
    for extra in _digit_combinations(digit_ranking, width):
        if len(alternatives) >= config.min_alternatives:
            break
        if extra != top.number and extra not in alternatives:
            alternatives.append(extra)
            filled.append(extra)

    prediction = Prediction(
        prediction=top.number,
        confidence=_confidence_bucket(margin, len(cleaned), config),
        method=METHOD_LABEL,
        alternatives=tuple(alternatives),
    )
    explanation = _explain(summary, patterns, prediction, top, runner_up, margin, filled, config)
    return AnalysisResult(
        statistical_summary=summary,
        pattern_analysis=patterns,
        prediction_output=prediction,
        detailed_explanation=explanation,
    )


def _frequency_table(numbers: Sequence[str]) -> List[Tuple[str, int]]:
    # Counter keeps first-occurrence order and sorted() is stable, so ties
    # resolve to the number seen earliest.
    return sorted(Counter(numbers).items(), key=lambda item: -item[1])


def _last_seen_gaps(numbers: Sequence[str]) -> Dict[str, int]:
    last_index: Dict[str, int] = {}
    for index, number in enumerate(numbers):
        last_index[number] = index
    # Rebuild in first-occurrence order.
    order = dict.fromkeys(numbers)
    return {number: len(numbers) - 1 - last_index[number] for number in order}


def _repeat_intervals(numbers: Sequence[str]) -> Dict[str, List[int]]:
    positions: Dict[str, List[int]] = {}
    for index, number in enumerate(numbers):
        positions.setdefault(number, []).append(index)
    return {
        number: [later - earlier for earlier, later in zip(idx, idx[1:])]
        for number, idx in positions.items()
        if len(idx) > 1
    }


def _digit_frequency(numbers: Sequence[str]) -> List[Tuple[str, int]]:
    counts = Counter(digit for number in numbers for digit in number)
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


def _dominant_width(numbers: Sequence[str]) -> int:
    return Counter(len(number) for number in numbers).most_common(1)[0][0]


def _digit_position_frequency(numbers: Sequence[str], width: int) -> List[Dict[str, Any]]:
    same_width = [number for number in numbers if len(number) == width]
    rows = []
    for position in range(width):
        counts = Counter(number[position] for number in same_width)
        digit, count = min(counts.items(), key=lambda item: (-item[1], item[0]))
        rows.append({"position": position + 1, "digit": digit, "count": count})
    return rows


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _trend(numbers: Sequence[str], window: int) -> Dict[str, Any]:
    widths = {len(number) for number in numbers}
    if len(widths) != 1 or max(widths) > MAX_NUMERIC_WIDTH:
        return {"direction": "not_applicable", "run_length": 0, "window": 0}

    tail = [int(number) for number in numbers[-window:]]
    if len(tail) < 2:
        return {"direction": "insufficient_data", "run_length": 0, "window": len(tail)}

    steps = [_sign(later - earlier) for earlier, later in zip(tail, tail[1:])]
    if all(step > 0 for step in steps):
        direction = "increasing"
    elif all(step < 0 for step in steps):
        direction = "decreasing"
    elif all(step == 0 for step in steps):
        direction = "flat"
    else:
        direction = "mixed"

    run_length = 0
    for step in reversed(steps):
        if step != steps[-1]:
            break
        run_length += 1
    return {"direction": direction, "run_length": run_length, "window": len(tail)}


def _descriptive_stats(numbers: Sequence[str]) -> Dict[str, Optional[float]]:
    if any(len(number) > MAX_NUMERIC_WIDTH for number in numbers):
        return dict.fromkeys(NUMERIC_STATS)
    values = np.asarray([int(number) for number in numbers], dtype=float)
    ddof = 1 if values.size > 1 else 0
    return {
        "mean": round(float(np.mean(values)), 2),
        "median": round(float(np.median(values)), 2),
        "std_dev": round(float(np.std(values, ddof=ddof)), 2),
        "variance": round(float(np.var(values, ddof=ddof)), 2),
        "min": round(float(np.min(values)), 2),
        "max": round(float(np.max(values)), 2),
    }


def _statistical_summary(numbers: Sequence[str], frequency_table: List[Tuple[str, int]]) -> Dict[str, Any]:
    most_number, most_count = frequency_table[0]
    least_number, least_count = min(Counter(numbers).items(), key=lambda item: item[1])
    summary: Dict[str, Any] = {
        "total_count": len(numbers),
        "distinct_count": len(frequency_table),
        "most_frequent_number": most_number,
        "most_frequent_count": most_count,
        "least_frequent_number": least_number,
        "least_frequent_count": least_count,
        "frequency_table": [{"number": number, "count": count} for number, count in frequency_table],
    }
    summary.update(_descriptive_stats(numbers))
    return summary


def _pattern_analysis(
    numbers: Sequence[str],
    gaps: Dict[str, int],
    digit_ranking: List[Tuple[str, int]],
    width: int,
    config: AnalysisConfig,
) -> Dict[str, Any]:
    recent = Counter(numbers[-config.recency_window :])
    return {
        "last_seen_gaps": gaps,
        "repeat_intervals": _repeat_intervals(numbers),
        "repeating_numbers": [number for number, count in recent.items() if count > 1],
        "recency_window": min(config.recency_window, len(numbers)),
        "trend": _trend(numbers, config.trend_window),
        "digit_frequency": [{"digit": digit, "count": count} for digit, count in digit_ranking],
        "digit_position_frequency": _digit_position_frequency(numbers, width),
    }


def _rank_candidates(
    frequency_table: List[Tuple[str, int]], gaps: Dict[str, int], config: AnalysisConfig
) -> List[Candidate]:
    total = len(frequency_table)
    recency_order = sorted(gaps, key=lambda number: gaps[number])
    recency_rank = {number: rank for rank, number in enumerate(recency_order, start=1)}

    candidates = []
    for frequency_rank, (number, count) in enumerate(frequency_table, start=1):
        score = (
            config.frequency_weight * (total - frequency_rank + 1) / total
            + config.recency_weight * (total - recency_rank[number] + 1) / total
        )
        candidates.append(
            Candidate(
                number=number,
                count=count,
                gap=gaps[number],
                frequency_rank=frequency_rank,
                recency_rank=recency_rank[number],
                score=round(score, 4),
            )
        )
    candidates.sort(key=lambda candidate: -candidate.score)
    return candidates


def _digit_combinations(digit_ranking: List[Tuple[str, int]], width: int) -> List[str]:
    ordered = [digit for digit, _ in digit_ranking]
    hot = "".join(ordered[:width])
    hot += ordered[0] * (width - len(hot))
    combos = [hot]
    cold = "".join(reversed(ordered))[:width]
    if len(cold) == width:
        combos.append(cold)
    combos.append(hot[::-1])
    return combos


def _confidence_bucket(margin: float, sample_size: int, config: AnalysisConfig) -> str:
    if sample_size < config.reliable_sample_size:
        return "Low"
    if margin >= config.high_confidence_margin:
        return "High"
    if margin >= config.medium_confidence_margin:
        return "Medium"
    return "Low"


def _explain(
    summary: Dict[str, Any],
    patterns: Dict[str, Any],
    prediction: Prediction,
    top: Candidate,
    runner_up: Optional[Candidate],
    margin: float,
    filled: List[str],
    config: AnalysisConfig,
) -> Dict[str, str]:
    total = summary["total_count"]
    trend = patterns["trend"]

    logic = f"'{top.number}' scored {top.score:.4f}"
    if runner_up is not None:
        logic += f", ahead of '{runner_up.number}' at {runner_up.score:.4f} (margin {margin:.4f})."
    else:
        logic += "; it is the only distinct number in the sequence."
    if prediction.alternatives:
        logic += " Alternatives are the next highest-scoring candidates"
        if filled:
            logic += f", with digit-frequency combinations {', '.join(filled)} filling the remaining slots"
        logic += "."

    uncertainty = (
        f"Confidence is {prediction.confidence}, bucketed from the score margin "
        f"(High at {config.high_confidence_margin:.2f} or more, Medium at "
        f"{config.medium_confidence_margin:.2f} or more)."
    )
    if total < config.reliable_sample_size:
        uncertainty += (
            f" Only {total} numbers were supplied, fewer than {config.reliable_sample_size}, "
            "so confidence is capped at Low."
        )
    uncertainty += " Past frequency does not change the odds of future draws."

    evidence = (
        f"Number '{summary['most_frequent_number']}' appeared {summary['most_frequent_count']} "
        f"times out of {total}, the most of any candidate. '{summary['least_frequent_number']}' "
        f"appeared least often ({summary['least_frequent_count']} times)."
    )
    if summary["mean"] is not None:
        evidence += (
            f" The mean value is {summary['mean']:.2f} with a standard deviation of "
            f"{summary['std_dev']:.2f}."
        )
    else:
        evidence += f" Numbers wider than {MAX_NUMERIC_WIDTH} digits are not summarised numerically."

    return {
        "Methodology": (
            f"Each of the {summary['distinct_count']} distinct numbers is ranked by how often it "
            f"appeared (weight {config.frequency_weight:.2f}) and by how recently it appeared "
            f"(weight {config.recency_weight:.2f}); the highest combined score is the prediction."
        ),
        "Statistical Evidence": evidence,
        "Pattern Evidence": (
            f"'{top.number}' was last seen {top.gap} draws ago. "
            f"{len(patterns['repeating_numbers'])} numbers repeated within the last "
            f"{patterns['recency_window']} draws. The trend over the last {trend['window']} "
            f"values is {trend['direction'].replace('_', ' ')}."
        ),
        "Prediction Logic": logic,
        "Uncertainty Analysis": uncertainty,
    }
