import pytest

from backend.app.core.state_machine import TimerCommand, TimerSession, control_visibility, parse_command
from backend.app.core.timeline import format_time_of_day
from backend.app.models.recipe import Action
from backend.app.models.timer import TimerStatus


def make_session(store, recipe_id="pasta"):
    timeline = [
        Action(id="boil", start_minute=0, duration_minutes=10),
        Action(id="drain", start_minute=10, duration_minutes=1),
    ]
    return TimerSession(recipe_id, store, timeline)


def test_start_pause_resume_reset_cycle(store):
    session = make_session(store)
    assert session.status is TimerStatus.STOPPED

    session.start()
    assert session.status is TimerStatus.RUNNING
    session.pause()
    assert session.status is TimerStatus.PAUSED
    session.resume()
    assert session.status is TimerStatus.RUNNING
    session.reset()
    assert session.status is TimerStatus.STOPPED
    assert store.get("pasta") is None


def test_second_pause_changes_nothing(store, clock):
    session = make_session(store)
    session.start()
    clock.advance(1_000)
    session.pause()
    paused = store.get("pasta")

    clock.advance(9_000)
    session.pause()
    assert store.get("pasta") == paused


def test_resume_keeps_elapsed_time(store, clock):
    session = make_session(store)
    session.start()
    clock.advance(10_000)
    before = store.elapsed_ms("pasta")

    session.pause()
    clock.advance(7_777)
    session.resume()

    assert store.elapsed_ms("pasta") == before
    state = store.get("pasta")
    assert state.paused_at is None and not state.is_paused
    clock.advance(1_000)
    assert store.elapsed_ms("pasta") == before + 1_000


def test_out_of_order_commands_are_no_ops(store):
    session = make_session(store)
    session.pause()
    session.resume()
    assert store.get("pasta") is None

    session.start()
    running = store.get("pasta")
    session.resume()
    assert store.get("pasta") == running


def test_sessions_for_different_recipes_do_not_clobber(store, clock):
    pasta = make_session(store, "pasta")
    soup = make_session(store, "soup")
    pasta.start()
    clock.advance(5_000)
    soup.start()
    soup.reset()

    assert pasta.status is TimerStatus.RUNNING
    assert store.elapsed_ms("pasta") == 5_000


def test_serving_size_is_remembered_before_start(store):
    session = make_session(store)
    session.update_serving_size(6)
    assert session.status is TimerStatus.STOPPED
    assert session.serving_size == 6

    session.start()
    assert store.get("pasta").serving_size == 6


def test_view_reflects_status(store, clock):
    session = make_session(store)
    view = session.view()
    assert view.controls.start and not view.controls.countdowns
    assert view.serving_size == 4

    session.start()
    clock.advance(2 * 60_000)
    view = session.view()
    assert view.status is TimerStatus.RUNNING
    assert view.controls.pause and view.controls.reset and not view.controls.start
    assert not view.controls.recipe_details
    assert view.display.current_step_id == "boil"
    assert view.display.next_step_id == "drain"


def test_control_visibility_when_paused():
    controls = control_visibility(TimerStatus.PAUSED)
    assert controls.resume and controls.reset and controls.timer_status
    assert not controls.pause and not controls.start


def test_handle_dispatches_commands(store):
    session = make_session(store)
    session.handle(TimerCommand.START, 2)
    assert store.get("pasta").serving_size == 2
    session.handle(TimerCommand.PAUSE)
    assert session.status is TimerStatus.PAUSED
    session.handle(TimerCommand.VISIBLE)
    assert session.status is TimerStatus.PAUSED
    session.handle(TimerCommand.RESET)
    assert session.status is TimerStatus.STOPPED


def test_parse_command():
    assert parse_command("Pause") == (TimerCommand.PAUSE, None)
    assert parse_command("serving:6") == (TimerCommand.SERVING, 6)
    with pytest.raises(ValueError):
        parse_command("explode")
    with pytest.raises(ValueError):
        parse_command("serving")


def test_resume_without_start_time_is_a_no_op(store, storage):
    storage.set_item("cookingTimer", '{"pasta": {"isPaused": true, "pausedAt": 5}}')
    session = make_session(store)
    assert session.status is TimerStatus.STOPPED

    session.resume()
    assert store.get("pasta").start_time is None
    assert session.status is TimerStatus.STOPPED


def test_bad_serving_sizes_are_rejected(store):
    with pytest.raises(ValueError):
        parse_command("start:-3")
    with pytest.raises(ValueError):
        parse_command("start:0")
    with pytest.raises(ValueError):
        parse_command("pause:2")
    assert parse_command("start:2") == (TimerCommand.START, 2)

    session = make_session(store)
    with pytest.raises(ValueError):
        session.start(0)
    with pytest.raises(ValueError):
        session.update_serving_size(-1)
    assert store.get("pasta") is None


def test_view_projects_step_start_times_onto_the_clock(store, clock):
    session = make_session(store)
    assert all(step.starts_at is None for step in session.view().display.steps)

    session.start()
    steps = {step.id: step for step in session.view().display.steps}
    assert steps["drain"].starts_at == format_time_of_day(clock.now + 10 * 60_000)

    session.pause()
    clock.advance(5 * 60_000)
    steps = {step.id: step for step in session.view().display.steps}
    assert steps["drain"].starts_at == format_time_of_day(clock.now + 10 * 60_000)
