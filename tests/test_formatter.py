"""
Tests for the learning-path and mini-project text blocks.
"""
import pytest
from factories import make_skill_payload

from skillvision.schemas.recommendation import GeneratedSkill, Pillar
from skillvision.services.formatter import (
    format_learning_path,
    format_mini_project,
    format_recommendation,
)


@pytest.fixture
def skill():
    return GeneratedSkill.model_validate(make_skill_payload())


class TestMiniProject:
    def test_contains_time_and_difficulty_lines(self, skill):
        block = format_mini_project(skill)
        assert "Estimated Time: 2-3 weeks" in block
        assert "Difficulty Level: Beginner" in block

    def test_layout(self, skill):
        lines = format_mini_project(skill).split("\n")
        assert lines[0] == "MINI-PROJECT: Line-Following Rover"
        assert lines[1] == ""
        assert lines[2].startswith("Build a small rover")
        assert lines[-2] == "Estimated Time: 2-3 weeks"
        assert lines[-1] == "Difficulty Level: Beginner"

    @pytest.mark.parametrize("difficulty", ["Beginner", "Intermediate", "Advanced", "Hard-ish"])
    def test_labels_present_for_any_difficulty(self, difficulty):
        payload = make_skill_payload()
        payload["mini_project"]["difficulty"] = difficulty
        block = format_mini_project(GeneratedSkill.model_validate(payload))
        assert "Estimated Time:" in block
        assert "Difficulty Level:" in block


class TestLearningPath:
    def test_sections_in_order(self, skill):
        block = format_learning_path(skill)
        start = block.index("HOW TO GET STARTED:")
        resources = block.index("FREE LEARNING RESOURCES:")
        vision = block.index("VISION 2030 CONNECTION:")
        assert start == 0
        assert start < resources < vision

    def test_resources_enumerated(self, skill):
        block = format_learning_path(skill)
        assert "1. Arduino Getting Started (Tutorial Series)" in block
        assert "2. Robotics for Beginners (YouTube Channel)" in block
        assert "   Provider: Arduino" in block

    def test_url_or_locate_instruction(self, skill):
        block = format_learning_path(skill)
        assert "   URL: https://docs.arduino.cc/learn/" in block
        assert "   Find it by: Search 'robotics for beginners playlist' on YouTube" in block

    def test_resource_description_line(self, skill):
        block = format_learning_path(skill)
        assert "   What you'll learn: Official beginner tutorials for boards, sensors and motors" in block

    def test_connection_text(self, skill):
        block = format_learning_path(skill)
        assert block.endswith(skill.vision_2030_connection)

    def test_empty_connection_falls_back_to_pillar(self):
        payload = make_skill_payload(vision_2030_connection="", vision_2030_pillar="Vibrant Society")
        block = format_learning_path(GeneratedSkill.model_validate(payload))
        assert block.endswith("VISION 2030 CONNECTION:\nSupports the Vibrant Society pillar.")


class TestBlocks:
    def test_blocks_are_trimmed(self, skill):
        blocks = format_recommendation(skill)
        assert blocks.learning_path_text == blocks.learning_path_text.strip()
        assert blocks.mini_project_text == blocks.mini_project_text.strip()

    def test_surrounding_whitespace_in_fields_is_trimmed(self):
        payload = make_skill_payload()
        payload["learning_plan"]["how_to_start"] = "\n\n  Start small.  \n"
        payload["mini_project"]["difficulty"] = " Beginner \n"
        blocks = format_recommendation(GeneratedSkill.model_validate(payload))
        assert blocks.learning_path_text.startswith("HOW TO GET STARTED:\nStart small.\n")
        assert blocks.mini_project_text.endswith("Difficulty Level: Beginner")

    def test_formatting_is_deterministic(self, skill):
        assert format_recommendation(skill) == format_recommendation(skill)

    def test_every_pillar_formats(self):
        for pillar in Pillar:
            payload = make_skill_payload(vision_2030_pillar=pillar.value)
            blocks = format_recommendation(GeneratedSkill.model_validate(payload))
            assert "Difficulty Level:" in blocks.mini_project_text
