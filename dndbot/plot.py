import io

import pandas
import plotly.express as px

from dndbot.freq_graph import FreqGraph


class _Percentage(float):
    def __repr__(self) -> str:
        result = f"{self * 100:.2f}"
        if result.endswith(".00"):
            result = result[:-3]
        return result + "%"


def to_frame(graph: FreqGraph) -> pandas.DataFrame:
    return pandas.DataFrame.from_records(
        list(graph.probabilities().items()), columns=["value", "probability"]
    )


def summary(label: str, graph: FreqGraph) -> str:
    mode = max(graph.outcomes(), key=lambda outcome: outcome[1])[0]
    mean = sum(value * weight for value, weight in graph.outcomes()) / graph.total_weight
    return (
        "**Input:** %s\n"
        "**Range:** %s to %s\n"
        "**Most likely:** %s (%r)\n"
        "**Mean:** %.2f\n"
        "**Total weight:** %s"
        % (
            label,
            graph.minimum,
            graph.maximum,
            mode,
            _Percentage(graph.max_weight / graph.total_weight),
            mean,
            graph.total_weight,
        )
    )


def plot(label: str, graph: FreqGraph) -> bytes:
    data = to_frame(graph)
    fig = px.bar(data, x="value", y="probability", title=label)
    fig.update_xaxes(title_text="value")
    fig.update_yaxes(title_text="probability", tickformat="%")
    stream = io.BytesIO()
    fig.write_image(file=stream, format="png")
    return stream.getvalue()
