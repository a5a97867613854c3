from lotfill.config.settings import Settings
from lotfill.extraction.locations import iter_locations
from lotfill.target.choices import ChoiceOption
from lotfill.target.json_drafts import JsonDraftHost
from lotfill.target.memory import InMemoryTargetHost


def location_choices() -> list[ChoiceOption]:
    """Choice options mirroring the location lookup table."""
    return [ChoiceOption(value=entry.code, text=entry.label) for entry in iter_locations()]


class TargetHostFactory:
    """Creates the target host named by ``settings.target_host``.

    The returned object is both the host and the field accessor.
    """

    HOSTS = ("json_drafts", "memory")

    @classmethod
    def create(cls, settings: Settings) -> JsonDraftHost | InMemoryTargetHost:
        name = settings.target_host.strip().lower()
        if name == "json_drafts":
            return JsonDraftHost(
                drafts_dir=settings.drafts_dir,
                current_url=settings.source_url,
                location_choices=location_choices(),
            )
        if name == "memory":
            return InMemoryTargetHost(location_choices=location_choices())
        raise ValueError(f"Unknown target host '{name}'. Choose from: {list(cls.HOSTS)}")
