"""
CSV export for Tea Farm Operations.

Exports are generated locally from the records already held in the store;
no network call is made. Files are written as UTF-8 with a BOM so that
spreadsheet applications pick the right encoding.

Usage:
    from teafarm.services.export import export_fields_to_csv

    path = export_fields_to_csv(store.fields.state.items)
"""

import csv
import io
import logging
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel

from teafarm.core.config import get_settings
from teafarm.models.field import Field
from teafarm.models.harvest_record import HarvestRecord
from teafarm.models.task import Task
from teafarm.models.weather_observation import WeatherObservation

logger = logging.getLogger(__name__)

LINE_TERMINATOR = "\n"

Header = Mapping[str, str]
Row = Union[Mapping[str, Any], BaseModel]

FIELD_HEADERS: List[Dict[str, str]] = [
    {"key": "name", "label": "Field Name"},
    {"key": "location", "label": "Location"},
    {"key": "areaSize", "label": "Area (ha)"},
    {"key": "soilType", "label": "Soil Type"},
    {"key": "notes", "label": "Notes"},
]

TASK_HEADERS: List[Dict[str, str]] = [
    {"key": "taskType", "label": "Task Type"},
    {"key": "assignedWorker", "label": "Assigned Worker"},
    {"key": "startDate", "label": "Start Date"},
    {"key": "endDate", "label": "End Date"},
    {"key": "status", "label": "Status"},
    {"key": "notes", "label": "Notes"},
]

HARVEST_RECORD_HEADERS: List[Dict[str, str]] = [
    {"key": "harvestDate", "label": "Harvest Date"},
    {"key": "quantityKg", "label": "Quantity (kg)"},
    {"key": "teaGrade", "label": "Tea Grade"},
    {"key": "notes", "label": "Notes"},
]

WEATHER_OBSERVATION_HEADERS: List[Dict[str, str]] = [
    {"key": "date", "label": "Observation Date"},
    {"key": "temperature", "label": "Temperature (°C)"},
    {"key": "rainfall", "label": "Rainfall (mm)"},
    {"key": "humidity", "label": "Humidity (%)"},
    {"key": "pestsSeen", "label": "Pests Seen"},
    {"key": "notes", "label": "Notes"},
]


def _as_mapping(item: Row) -> Mapping[str, Any]:
    if isinstance(item, BaseModel):
        return item.model_dump(by_alias=True)
    return item


def _render(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _write_row(buffer: io.StringIO, writer, values: List[str]) -> None:
    # a lone empty field stays unquoted
    if values == [""]:
        buffer.write(LINE_TERMINATOR)
    else:
        writer.writerow(values)


def generate_csv(data: Iterable[Row], headers: Sequence[Header]) -> str:
    """
    Build comma-delimited text from records.

    Args:
        data: Records as mappings or pydantic models (looked up by camelCase key)
        headers: Ordered ``{"key": ..., "label": ...}`` column definitions

    Returns:
        Header row followed by one row per record, joined with ``\\n`` and
        without a trailing newline. Values containing a comma, newline or
        double quote are quoted, with inner quotes doubled.

    Example:
        >>> generate_csv([{"name": "a,b", "value": "1"}],
        ...              [{"key": "name", "label": "N"}, {"key": "value", "label": "V"}])
        'N,V\\n"a,b",1'
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator=LINE_TERMINATOR, quoting=csv.QUOTE_MINIMAL)

    _write_row(buffer, writer, [h["label"] for h in headers])
    for item in data:
        record = _as_mapping(item)
        _write_row(buffer, writer, [_render(record.get(h["key"])) for h in headers])

    content = buffer.getvalue()
    if content.endswith(LINE_TERMINATOR):
        content = content[: -len(LINE_TERMINATOR)]
    return content


def write_csv(content: str, path: Path) -> Path:
    """
    Write CSV text to ``path`` as UTF-8 with a byte order mark.

    Returns:
        The written path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8-sig", newline="") as f:
        f.write(content)
    logger.info(f"CSV exported to {path}")
    return path


def _export(
    prefix: str,
    records: Iterable[Row],
    headers: Sequence[Header],
    directory: Optional[Path],
    today: Optional[date],
) -> Path:
    directory = Path(directory) if directory is not None else get_settings().export_dir
    stamp = (today or date.today()).isoformat()
    return write_csv(generate_csv(records, headers), directory / f"{prefix}_{stamp}.csv")


def export_fields_to_csv(
    fields: Iterable[Field], directory: Optional[Path] = None, today: Optional[date] = None
) -> Path:
    """Export fields to ``fields_YYYY-MM-DD.csv``."""
    return _export("fields", fields, FIELD_HEADERS, directory, today)


def export_tasks_to_csv(
    tasks: Iterable[Task], directory: Optional[Path] = None, today: Optional[date] = None
) -> Path:
    """Export tasks to ``tasks_YYYY-MM-DD.csv``."""
    return _export("tasks", tasks, TASK_HEADERS, directory, today)


def export_harvest_records_to_csv(
    records: Iterable[HarvestRecord],
    directory: Optional[Path] = None,
    today: Optional[date] = None,
) -> Path:
    """Export harvest records to ``harvest_records_YYYY-MM-DD.csv``."""
    return _export("harvest_records", records, HARVEST_RECORD_HEADERS, directory, today)


def export_weather_observations_to_csv(
    observations: Iterable[WeatherObservation],
    directory: Optional[Path] = None,
    today: Optional[date] = None,
) -> Path:
    """Export weather observations to ``weather_observations_YYYY-MM-DD.csv``."""
    return _export(
        "weather_observations", observations, WEATHER_OBSERVATION_HEADERS, directory, today
    )


def export_all_data_to_csv(
    fields: Iterable[Field],
    tasks: Iterable[Task],
    harvest_records: Iterable[HarvestRecord],
    weather_observations: Iterable[WeatherObservation],
    directory: Optional[Path] = None,
    today: Optional[date] = None,
) -> List[Path]:
    """
    Export every collection, one file each.

    Returns:
        Written paths in the order fields, tasks, harvest records, weather
    """
    return [
        export_fields_to_csv(fields, directory, today),
        export_tasks_to_csv(tasks, directory, today),
        export_harvest_records_to_csv(harvest_records, directory, today),
        export_weather_observations_to_csv(weather_observations, directory, today),
    ]
