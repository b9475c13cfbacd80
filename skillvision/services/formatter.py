"""Render a normalized recommendation into the two stored text blocks."""
from skillvision.schemas.recommendation import FormattedBlocks, FreeResource, GeneratedSkill


def _format_resource(index: int, resource: FreeResource) -> str:
    if resource.url:
        locate = f"URL: {resource.url}"
    else:
        locate = f"Find it by: {resource.description}"
    lines = [
        f"{index}. {resource.title} ({resource.type})",
        f"   Provider: {resource.provider}",
        f"   {locate}",
    ]
    if resource.description:
        lines.append(f"   What you'll learn: {resource.description}")
    return "\n".join(lines)


def format_learning_path(skill: GeneratedSkill) -> str:
    plan = skill.learning_plan
    resources = "\n\n".join(
        _format_resource(i, resource) for i, resource in enumerate(plan.free_resources, start=1)
    )
    connection = skill.vision_2030_connection.strip() or f"Supports the {skill.pillar.value} pillar."

    return f"""HOW TO GET STARTED:
{plan.how_to_start}

FREE LEARNING RESOURCES:

{resources}

VISION 2030 CONNECTION:
{connection}""".strip()


def format_mini_project(skill: GeneratedSkill) -> str:
    project = skill.mini_project
    return f"""MINI-PROJECT: {project.title}

{project.description}

Estimated Time: {project.estimated_time}
Difficulty Level: {project.difficulty}""".strip()


def format_recommendation(skill: GeneratedSkill) -> FormattedBlocks:
    return FormattedBlocks(
        learning_path_text=format_learning_path(skill),
        mini_project_text=format_mini_project(skill),
    )
