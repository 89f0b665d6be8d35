from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional, Any, Dict, Union, Literal, Annotated


class ColumnType:
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    STRING = "string"

    # Tie-break priority when tallies are equal
    PRIORITY = (DATE, NUMBER, BOOLEAN, STRING)
    CATEGORICAL = (STRING, BOOLEAN)


class ChartType:
    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    AREA = "area"
    COMPOSED = "composed"
    HBAR = "hbar"


class _Model(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ColumnTypeInfo(_Model):
    type: Literal["number", "date", "boolean", "string"]
    non_null_count: int


class TopValue(_Model):
    value: str
    count: int


class TimelinePoint(_Model):
    day: str  # ISO YYYY-MM-DD, UTC
    count: int


class NumberSummary(_Model):
    type: Literal["number"] = "number"
    count: int = 0
    nulls: int = 0
    sum: float = 0.0
    min: float = 0.0
    max: float = 0.0
    mean: float = 0.0


class CategoricalSummary(_Model):
    type: Literal["string", "boolean"] = "string"
    nulls: int = 0
    distinct: int = 0
    top: List[TopValue] = []


class DateSummary(_Model):
    type: Literal["date"] = "date"
    nulls: int = 0
    timeline: List[TimelinePoint] = []
    min_date: Optional[str] = None  # ISO timestamp
    max_date: Optional[str] = None


ColumnSummary = Annotated[
    Union[NumberSummary, CategoricalSummary, DateSummary],
    Field(discriminator="type"),
]


class PrimaryColumnSelection(_Model):
    date_col: Optional[str] = None
    num_col: Optional[str] = None
    cat_col: Optional[str] = None


class ChartSpec(_Model):
    type: Literal["bar", "line", "pie", "area", "composed", "hbar"]
    title: str
    data_key: str
    name_key: str
    data: List[Dict[str, Any]]
    current_type: Literal["bar", "line", "pie", "area", "composed", "hbar"]


class KeyMetric(_Model):
    title: str
    value: str
    description: str


class PreStats(_Model):
    row_count: int
    column_names: List[str]
    column_types: Dict[str, ColumnTypeInfo]
    column_summaries: Dict[str, ColumnSummary]
    charts: List[ChartSpec] = []
    key_metrics: List[KeyMetric] = []


class AnalysisResult(_Model):
    analysis_text: str
    key_metrics: List[KeyMetric]
    charts: List[ChartSpec]
    pre_stats: PreStats
