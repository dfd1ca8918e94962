"""
Chart state reconciliation.

Builds the two-dataset chart description the first time data arrives, then
patches that same object on every later parameter change so the widget
drawing it is updated rather than recreated.
"""

from typing import Optional

from threshold_chart.utilities.config.api_config import chart_config
from threshold_chart.utilities.data.models import ChartState, Dataset, Parameters, Series, SeriesId
from threshold_chart.utilities.services.threshold_classifier import point_colors


PRIMARY_STYLE = {
    'border_color': '#3F51B5',
    'background_color': '#ffffff',
    'fill': False,
}

THRESHOLD_STYLE = {
    'border_dash': [7, 3],
    'border_color': '#878787',
    'background_color': '#ffffff',
    'fill': False,
    'point_radius': 0,
}

THRESHOLD_LABEL = 'Threshold'


class ChartReconciler:
    """Owns every mutation of a ChartState"""

    def __init__(self, population_country: str, exceeded_color: str = None, within_color: str = None):
        self.population_country = population_country
        self.exceeded_color = exceeded_color or chart_config.exceeded_color
        self.within_color = within_color or chart_config.within_color

    def primary_label(self, series_id: SeriesId) -> str:
        if series_id is SeriesId.STOCK:
            return 'Close Price'
        return f"Total Population ({self.population_country})"

    def _compute(self, series: Series, parameters: Parameters):
        visible = series.head(parameters.max_points)
        values = list(visible.values)
        colors = point_colors(values, parameters.threshold, self.exceeded_color, self.within_color)
        return list(visible.labels), values, colors

    def build(self, series: Series, parameters: Parameters) -> ChartState:
        labels, values, colors = self._compute(series, parameters)
        return ChartState(
            labels=labels,
            primary=Dataset(
                label=self.primary_label(parameters.series_id),
                data=values,
                point_colors=colors,
                style=dict(PRIMARY_STYLE),
            ),
            threshold=Dataset(
                label=THRESHOLD_LABEL,
                data=[parameters.threshold] * len(values),
                style={**THRESHOLD_STYLE, 'border_dash': list(THRESHOLD_STYLE['border_dash'])},
            ),
        )

    def patch(self, existing: ChartState, series: Series, parameters: Parameters) -> ChartState:
        """Update `existing` in place, keeping renderer-owned style fields."""
        labels, values, colors = self._compute(series, parameters)

        primary = existing.primary
        primary.data = values
        primary.label = self.primary_label(parameters.series_id)
        primary.point_colors = colors

        existing.threshold.data = [parameters.threshold] * len(values)
        existing.labels = labels
        return existing

    def reconcile(self, existing: Optional[ChartState], series: Series, parameters: Parameters) -> ChartState:
        if existing is None:
            return self.build(series, parameters)
        return self.patch(existing, series, parameters)
