import matplotlib

matplotlib.use("Agg")

from conftest import parent, person, spouse  # noqa: E402
from models import LayoutOptions  # noqa: E402
from plotting import layout_to_dot, plot_layout  # noqa: E402
from registry import calculate_layout  # noqa: E402


def _family():
    persons = [
        person("A", "John", "Smith", born=1900, sex="M"),
        person("B", "Jane", "Smith", born=1902, sex="F"),
        person("C", "Carl", "Smith", born=1930),
    ]
    relationships = [spouse("A", "B"), parent("A", "C"), parent("B", "C")]
    return persons, relationships


def test_layout_to_dot_pins_positions():
    persons, relationships = _family()
    result = calculate_layout("orthogonal", persons, relationships, LayoutOptions("A"))

    dot = layout_to_dot(result, {p.id: p for p in persons}).to_string()

    assert 'pos="0,-200!"' in dot
    assert 'pos="200,-200!"' in dot
    assert "junction-A-B" in dot
    assert "dashed" in dot
    assert "lightpink" in dot


def test_layout_to_dot_without_persons_uses_ids():
    persons, relationships = _family()
    result = calculate_layout("vertical", persons, relationships, LayoutOptions("A"))

    dot = layout_to_dot(result)

    assert {n.get_name() for n in dot.get_nodes()} >= {"A", "C"}
    assert dot.get_node("A")[0].get("label") == "A"


def test_plot_layout_writes_image(tmp_path, capsys):
    persons, relationships = _family()
    result = calculate_layout("orthogonal", persons, relationships, LayoutOptions("A"))
    output_path = tmp_path / "layout.png"

    plot_layout(result, {p.id: p for p in persons}, output_path)

    assert output_path.stat().st_size > 0
    assert f"Layout saved to {output_path}" in capsys.readouterr().out
