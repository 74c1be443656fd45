"""Unit tests for src/services/game_service.py"""

import threading
from uuid import UUID, uuid4

import pytest

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    ListGamesRequest,
    MoveRequest,
)
from src.core.exceptions import (
    ColumnFullError,
    GameError,
    GameNotFoundError,
    GameStateError,
    InvalidColumnError,
    NotYourTurnError,
)
from src.core.models import GameModel
from src.core.shared_types import Color, GameMode, Outcome, Status
from src.db.repository import GameRepository
from src.services.game_service import GameService

EMPTY_BOARD = [[""] * 5 for _ in range(4)]


def create_game(
    service: GameService,
    human_color: Color = Color.YELLOW,
    mode: GameMode = GameMode.HUMAN_VS_AI,
) -> UUID:
    response = service.create_new_game(CreateGameRequest(human_color=human_color, mode=mode))
    return response.game_id


def move(service: GameService, game_id: UUID, color: Color, column: int) -> GameResponse:
    return service.make_move(MoveRequest(game_id=game_id, color=color, column=column))


# --- SERVICE - CREATE NEW GAME ----
def test_create_a_new_game(mock_repository: GameRepository) -> None:
    """Check that new game is created, persisted in repo, and return has the appropriate information."""
    service = GameService(mock_repository)
    response = service.create_new_game(
        CreateGameRequest(human_color=Color.RED, mode=GameMode.HUMAN_VS_AI)
    )

    # Check response structure
    assert isinstance(response, GameResponse)
    assert isinstance(response.game_id, UUID)

    # Check response data
    assert response.human_color == Color.RED
    assert response.mode == GameMode.HUMAN_VS_AI
    assert response.state == Status.PLAYING
    assert response.current_turn == Color.YELLOW
    assert response.board == EMPTY_BOARD
    assert response.moves == []
    assert response.result is None
    assert response.winning_cells == []
    assert response.last_move is None

    # Check persisted data
    stored_game = mock_repository.get_game(response.game_id)
    assert stored_game is not None
    assert stored_game.state == Status.PLAYING
    assert stored_game.board == EMPTY_BOARD
    assert stored_game.moves == []


# --- SERVICE - GET GAME ----
def test_get_game_state(mock_repository: GameRepository) -> None:
    service = GameService(mock_repository)
    game_id = create_game(service)
    move(service, game_id, Color.YELLOW, 2)

    response = service.get_game_state(GetGameRequest(game_id=game_id))
    assert response.game_id == game_id
    assert response.board[3][2] == "Y"
    assert response.current_turn == Color.RED


def test_get_unknown_game(mock_repository: GameRepository) -> None:
    service = GameService(mock_repository)
    with pytest.raises(GameNotFoundError) as error:
        service.get_game_state(GetGameRequest(game_id=uuid4()))
    assert error.value.kind == "NotFound"


# --- SERVICE - MAKE MOVE ----
def test_make_move_persists_the_game(mock_repository: GameRepository) -> None:
    service = GameService(mock_repository)
    game_id = create_game(service)

    response = move(service, game_id, Color.YELLOW, 2)
    assert response.board[3][2] == "Y"
    assert response.current_turn == Color.RED
    assert response.last_move is not None
    assert (response.last_move.column, response.last_move.row) == (2, 3)
    assert [(m.color, m.column) for m in response.moves] == [(Color.YELLOW, 2)]

    stored_game = mock_repository.get_game(game_id)
    assert stored_game is not None
    assert stored_game.board == response.board
    assert stored_game.current_turn == "R"


def test_make_move_on_unknown_game(mock_repository: GameRepository) -> None:
    service = GameService(mock_repository)
    with pytest.raises(GameNotFoundError):
        move(service, uuid4(), Color.YELLOW, 2)


def test_vertical_win_scenario(mock_repository: GameRepository) -> None:
    service = GameService(mock_repository)
    game_id = create_game(service)
    for column in [2, 0, 2, 0, 2, 0]:
        current = service.get_game_state(GetGameRequest(game_id=game_id)).current_turn
        move(service, game_id, current, column)

    response = move(service, game_id, Color.YELLOW, 2)
    assert response.state == Status.FINISHED
    assert response.result == Outcome.YELLOW_WON
    assert [(cell.row, cell.col) for cell in response.winning_cells] == [
        (3, 2),
        (2, 2),
        (1, 2),
        (0, 2),
    ]


@pytest.mark.parametrize(
    "color, column, error_type",
    [
        (Color.RED, 2, NotYourTurnError),
        (Color.YELLOW, 5, InvalidColumnError),
        (Color.YELLOW, -1, InvalidColumnError),
    ],
)
def test_rejected_moves_leave_game_unchanged(
    mock_repository: GameRepository, color: Color, column: int, error_type: type[GameError]
) -> None:
    """Make sure service propagates the exceptions, and nothing gets stored."""
    service = GameService(mock_repository)
    game_id = create_game(service)
    before = mock_repository.get_game(game_id)

    with pytest.raises(error_type):
        move(service, game_id, color, column)
    assert mock_repository.get_game(game_id) == before


def test_full_column(mock_repository: GameRepository) -> None:
    service = GameService(mock_repository)
    game_id = create_game(service)
    for color in [Color.YELLOW, Color.RED, Color.YELLOW, Color.RED]:
        move(service, game_id, color, 1)
    with pytest.raises(ColumnFullError) as error:
        move(service, game_id, Color.YELLOW, 1)
    assert error.value.kind == "ColumnFull"


def test_no_moves_after_game_finished(mock_repository: GameRepository) -> None:
    service = GameService(mock_repository)
    game_id = create_game(service)
    for color, column in zip([Color.YELLOW, Color.RED] * 4, [2, 0, 2, 0, 2, 0, 2]):
        move(service, game_id, color, column)

    finished = mock_repository.get_game(game_id)
    with pytest.raises(GameStateError):
        move(service, game_id, Color.RED, 3)
    assert mock_repository.get_game(game_id) == finished


def test_racing_submissions_only_one_wins(mock_repository: GameRepository) -> None:
    """Two submissions for the same turn: exactly one is accepted, the other is told it is not its turn"""
    service = GameService(mock_repository)
    game_id = create_game(service)
    start = threading.Barrier(2)
    outcomes: list[str] = []

    def submit(column: int) -> None:
        start.wait()
        try:
            move(service, game_id, Color.YELLOW, column)
            outcomes.append("accepted")
        except NotYourTurnError:
            outcomes.append("rejected")

    threads = [threading.Thread(target=submit, args=(column,)) for column in (1, 3)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(outcomes) == ["accepted", "rejected"]
    stored_game = mock_repository.get_game(game_id)
    assert stored_game is not None
    assert len(stored_game.moves) == 1


def test_two_services_on_one_store_never_lose_a_move(
    mock_repository: GameRepository, monkeypatch: pytest.MonkeyPatch
) -> None:
    """
    Services do not share their locks. The second service stores its move right after the first one read the game:
    the first submission must be turned down instead of overwriting the stored move.
    """
    first, second = GameService(mock_repository), GameService(mock_repository)
    game_id = create_game(first)
    read_game = mock_repository.get_game

    def read_then_other_service_moves(requested_id: UUID) -> GameModel | None:
        stored = read_game(requested_id)
        monkeypatch.setattr(mock_repository, "get_game", read_game)
        move(second, requested_id, Color.YELLOW, 3)
        return stored

    monkeypatch.setattr(mock_repository, "get_game", read_then_other_service_moves)
    with pytest.raises(NotYourTurnError):
        move(first, game_id, Color.YELLOW, 1)

    stored_game = mock_repository.get_game(game_id)
    assert stored_game is not None
    assert [(m["color"], m["column"]) for m in stored_game.moves] == [("Y", 3)]


def test_lost_race_on_a_finished_game(
    mock_repository: GameRepository, monkeypatch: pytest.MonkeyPatch
) -> None:
    """The concurrent move ended the game: the late submission is told the game is no longer playing"""
    first, second = GameService(mock_repository), GameService(mock_repository)
    game_id = create_game(first)
    for color, column in zip([Color.YELLOW, Color.RED] * 3, [2, 0, 2, 0, 2, 0]):
        move(first, game_id, color, column)
    read_game = mock_repository.get_game

    def read_then_other_service_wins(requested_id: UUID) -> GameModel | None:
        stored = read_game(requested_id)
        monkeypatch.setattr(mock_repository, "get_game", read_game)
        move(second, requested_id, Color.YELLOW, 2)
        return stored

    monkeypatch.setattr(mock_repository, "get_game", read_then_other_service_wins)
    with pytest.raises(GameStateError):
        move(first, game_id, Color.YELLOW, 4)

    stored_game = mock_repository.get_game(game_id)
    assert stored_game is not None
    assert stored_game.result == "Y won"
    assert len(stored_game.moves) == 7


# --- SERVICE - LIST / DELETE ----
def test_list_games_newest_first(mock_repository: GameRepository) -> None:
    service = GameService(mock_repository)
    game_ids = [create_game(service) for _ in range(3)]

    responses = service.list_games(ListGamesRequest(limit=2))
    assert [response.game_id for response in responses] == [game_ids[2], game_ids[1]]


def test_delete_game(mock_repository: GameRepository) -> None:
    service = GameService(mock_repository)
    game_id = create_game(service)
    service.delete_game(DeleteGameRequest(game_id=game_id))

    with pytest.raises(GameNotFoundError):
        service.get_game_state(GetGameRequest(game_id=game_id))
