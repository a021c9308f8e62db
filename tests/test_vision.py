"""Tests for turning vision model output into grids."""

import base64
import json

import pytest
from pydantic import ValidationError

from models import Cell, Definition, Direction, Grid
from services import VisionClient, VisionError, parse_grid_response


GRID_JSON = {
    "rows": 2,
    "cols": 3,
    "cells": [
        [
            {"black": True, "definitions": [
                {"text": "Capitale", "direction": "right"},
                {"text": "Fleuve", "direction": "down"},
            ]},
            {"black": False},
            {"black": False},
        ],
        [{"black": False}, {"black": False}, {"black": False}],
    ],
}


class FakeMessage:
    def __init__(self, content):
        self.content = content


class FakeLlm:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.messages = None

    def invoke(self, messages):
        self.messages = messages
        if self.error is not None:
            raise self.error
        return FakeMessage(self.content)


class TestParseGridResponse:

    def test_valid_grid(self):
        grid = parse_grid_response(json.dumps(GRID_JSON))

        assert (grid.rows, grid.cols) == (2, 3)
        assert grid.cells[0][0].is_definition
        assert [d.direction for d in grid.cells[0][0].definitions] == [Direction.RIGHT, Direction.DOWN]
        assert not grid.cells[1][2].is_definition

    def test_markdown_fence_is_tolerated(self):
        text = "```json\n" + json.dumps(GRID_JSON) + "\n```"
        assert parse_grid_response(text).rows == 2

    def test_model_supplied_identity_is_ignored(self):
        data = dict(GRID_JSON, id="chosen-by-model", created_at="2020-01-01T00:00:00Z")
        grid = parse_grid_response(json.dumps(data))
        assert grid.id == ""
        assert grid.created_at is None

    @pytest.mark.parametrize("text", ["", "   ", "not json", "[1, 2]"])
    def test_unparseable(self, text):
        with pytest.raises(VisionError):
            parse_grid_response(text)

    @pytest.mark.parametrize("data", [
        dict(GRID_JSON, rows=0),
        dict(GRID_JSON, cols=0),
        dict(GRID_JSON, cells=[]),
        dict(GRID_JSON, rows=3),
        dict(GRID_JSON, cols=2),
        dict(GRID_JSON, cells=[[{"black": False}] * 3, [{"black": True, "definitions": [{"text": "x", "direction": "up"}]}] * 3]),
    ])
    def test_inconsistent_grid(self, data):
        with pytest.raises(VisionError):
            parse_grid_response(json.dumps(data))


class TestGridModel:

    def test_letter_cell_cannot_carry_definitions(self):
        with pytest.raises(ValidationError):
            Cell(black=False, definitions=[Definition(text="x", direction=Direction.RIGHT)])

    def test_at_most_two_definitions(self):
        definition = Definition(text="x", direction=Direction.RIGHT)
        with pytest.raises(ValidationError):
            Cell(black=True, definitions=[definition] * 3)

    def test_definition_cell_lookup(self):
        grid = Grid.model_validate(GRID_JSON)
        assert grid.is_definition_cell(0, 0)
        assert not grid.is_definition_cell(0, 1)
        assert not grid.is_definition_cell(5, 5)

    def test_to_dict_omits_empty_definitions(self):
        data = Grid.model_validate(GRID_JSON).to_dict()
        assert data["cells"][0][1] == {"black": False}
        assert data["cells"][0][0]["definitions"][1] == {"text": "Fleuve", "direction": "down"}


class TestVisionClient:

    def test_sends_prompt_and_inline_image(self):
        llm = FakeLlm(content=json.dumps(GRID_JSON))
        client = VisionClient("test-project", llm=llm)

        grid = client.analyze_image(b"\x89PNG", "image/png")

        assert grid.rows == 2
        (message,) = llm.messages
        text_part, image_part = message.content
        assert "mots fléchés" in text_part["text"]
        expected = "data:image/png;base64," + base64.b64encode(b"\x89PNG").decode("ascii")
        assert image_part["image_url"]["url"] == expected

    def test_multipart_answer(self):
        llm = FakeLlm(content=[{"type": "text", "text": json.dumps(GRID_JSON)}])
        grid = VisionClient("test-project", llm=llm).analyze_image(b"img", "image/jpeg")
        assert grid.cols == 3

    def test_model_error_becomes_vision_error(self):
        llm = FakeLlm(error=RuntimeError("429 Resource has been exhausted"))
        with pytest.raises(VisionError):
            VisionClient("test-project", llm=llm).analyze_image(b"img", "image/png")

    def test_bad_answer_becomes_vision_error(self):
        llm = FakeLlm(content="Désolé, je ne peux pas lire cette image.")
        with pytest.raises(VisionError):
            VisionClient("test-project", llm=llm).analyze_image(b"img", "image/png")
