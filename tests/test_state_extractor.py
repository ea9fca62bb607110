import pytest
from fakes import FakeLLM

from casefile.core.state_extractor import StateExtractor
from casefile.errors import CompletionError
from casefile.models.game_state import Memory
from casefile.models.message import Message
from casefile.services.state_service import start_conversation


@pytest.fixture
def talking(state):
    start_conversation(state, "char-1")
    state.history_for("char-1").extend(
        [
            Message(role="user", content="Where were you?"),
            Message(role="assistant", content="In the greenhouse, with the orchids."),
        ]
    )
    return state


def _memory(content, origin="char-1"):
    return {"origin_id": origin, "origin_type": "character", "content": content}


def test_both_extractions_are_requested(world, talking):
    llm = FakeLLM(structured={"memory-update": [[]], "clues-update": [[]]})

    StateExtractor(llm, model="m").update_game_state(world, talking)

    assert len(llm.calls_for("memory-update")) == 1
    assert len(llm.calls_for("clues-update")) == 1
    assert all(c.model == "m" for c in llm.calls)


def test_deltas_are_merged(world, talking):
    llm = FakeLLM(
        structured={
            "memory-update": [[_memory("Was in the greenhouse")]],
            "clues-update": [["clue-1", "clue-8"]],
        }
    )

    StateExtractor(llm).update_game_state(world, talking)

    assert talking.memories == [Memory(origin_id="char-1", content="Was in the greenhouse")]
    assert talking.clues_found == ["clue-1", "clue-8"]


def test_unknown_and_repeated_clues_are_ignored(world, talking):
    talking.clues_found.append("clue-1")
    llm = FakeLLM(structured={"memory-update": [[]], "clues-update": [["clue-1", "clue-404", "clue-9"]]})

    StateExtractor(llm).update_game_state(world, talking)

    assert talking.clues_found == ["clue-1", "clue-9"]


def test_malformed_memories_are_skipped(world, talking):
    llm = FakeLLM(
        structured={
            "memory-update": [[{"content": "no origin"}, _memory("Likes orchids")]],
            "clues-update": [[]],
        }
    )

    StateExtractor(llm).update_game_state(world, talking)

    assert [m.content for m in talking.memories] == ["Likes orchids"]


def test_non_list_result_is_treated_as_empty(world, talking):
    llm = FakeLLM(structured={"memory-update": [{"memories": []}], "clues-update": [{"clues": ["clue-1"]}]})

    StateExtractor(llm).update_game_state(world, talking)

    assert talking.memories == []
    assert talking.clues_found == []


def test_failure_leaves_state_untouched(world, talking):
    llm = FakeLLM(
        structured={
            "memory-update": [[_memory("Would be lost")]],
            "clues-update": [CompletionError("timeout")],
        }
    )

    with pytest.raises(CompletionError):
        StateExtractor(llm).update_game_state(world, talking)

    assert talking.memories == []
    assert talking.clues_found == []


def test_skipped_when_not_conversing(world, state):
    llm = FakeLLM()
    StateExtractor(llm).update_game_state(world, state)
    assert llm.calls == []


def test_skipped_without_history(world, state):
    start_conversation(state, "char-1")
    llm = FakeLLM()
    StateExtractor(llm).update_game_state(world, state)
    assert llm.calls == []


def test_prompts_carry_conversation_and_hide_solution(world, talking):
    llm = FakeLLM(structured={"memory-update": [[]], "clues-update": [[]]})

    StateExtractor(llm).update_game_state(world, talking)

    for call in llm.calls:
        system = call.messages[0].content
        assert "In the greenhouse, with the orchids." in system
        assert "SECRET-MOTIVE" not in system


def test_memories_are_appended_verbatim(world, talking):
    talking.memories.append(Memory(origin_id="char-1", content="Was in the greenhouse"))
    llm = FakeLLM(
        structured={
            "memory-update": [
                [
                    _memory("Was in the greenhouse"),
                    _memory("Saw a stranger", origin="char-404"),
                    {"origin_id": "char-1", "origin_type": "rumour", "content": "The cook gossips"},
                ]
            ],
            "clues-update": [[]],
        }
    )

    StateExtractor(llm).update_game_state(world, talking)

    assert [(m.origin_id, m.origin_type, m.content) for m in talking.memories] == [
        ("char-1", "character", "Was in the greenhouse"),
        ("char-1", "character", "Was in the greenhouse"),
        ("char-404", "character", "Saw a stranger"),
        ("char-1", "rumour", "The cook gossips"),
    ]
