import pytest

R1 = ["A", "D", "B", "C", "G", "F"]
R2 = ["B", "D", "E", "C"]
R3 = ["A", "B", "D", "C", "G", "F", "E"]
R4 = ["G", "D", "E", "A", "F", "C"]


@pytest.fixture
def paper_rankings() -> list[list[str]]:
    """The four example rankings from the RBC paper."""
    return [list(R1), list(R2), list(R3), list(R4)]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "RBCFUSE_LOG_LEVEL",
        "RBCFUSE_LOG_JSON",
        "RBCFUSE_FUSION_PERSISTENCE",
        "RBCFUSE_FUSION_SCHEDULE_PREFIX",
        "RBCFUSE_FUSION_TOP_N",
    ):
        monkeypatch.delenv(name, raising=False)
