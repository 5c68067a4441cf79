"""Marshmallow schemas for dumping pivot tables as JSON."""

import marshmallow as ma


class PeriodSchema(ma.Schema):
    """Serialize :class:`~studio_metrics.periods.PeriodDescriptor`."""

    key = ma.fields.Str()
    label = ma.fields.Str()
    year = ma.fields.Int()
    month = ma.fields.Int()
    quarter = ma.fields.Int()


class ColumnGroupSchema(ma.Schema):
    label = ma.fields.Str()
    periods = ma.fields.List(ma.fields.Nested(PeriodSchema))


class GrowthSchema(ma.Schema):
    change = ma.fields.Float()
    magnitude = ma.fields.Float()
    trend = ma.fields.Function(lambda growth: growth.trend.value)
    label = ma.fields.Str()


class PivotCellSchema(ma.Schema):
    period = ma.fields.Str()
    value = ma.fields.Float(allow_none=True)
    growth = ma.fields.Nested(GrowthSchema, allow_none=True)
    negative = ma.fields.Bool(attribute="is_negative")


class PivotRowSchema(ma.Schema):
    label = ma.fields.Str()
    kind = ma.fields.Function(lambda row: row.kind.value)
    group = ma.fields.Str(allow_none=True)
    total = ma.fields.Float(allow_none=True)
    cells = ma.fields.List(ma.fields.Nested(PivotCellSchema))


class PivotTableSchema(ma.Schema):
    """Dump-only schema for :class:`~studio_metrics.pivot.table.PivotTable`."""

    metric = ma.fields.Str()
    dimension = ma.fields.Str()
    view = ma.fields.Function(lambda table: table.view.value)
    column_groups = ma.fields.List(ma.fields.Nested(ColumnGroupSchema))
    rows = ma.fields.List(ma.fields.Nested(PivotRowSchema))


__all__ = [
    "ColumnGroupSchema",
    "GrowthSchema",
    "PeriodSchema",
    "PivotCellSchema",
    "PivotRowSchema",
    "PivotTableSchema",
]
