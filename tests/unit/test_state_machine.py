import unittest

from s3sync.core.state_machine import StateMachine
from s3sync.enums.transfer_state import TransferState
from s3sync.exceptions.state_exceptions import IllegalStateSwitchException


class StateMachineTest(unittest.TestCase):
    def test_successful_transfer(self):
        sm = StateMachine()

        sm.trigger("start")  # PENDING -> RUNNING
        self.assertEqual(sm.get_state(), TransferState.RUNNING)

        sm.trigger("succeed")  # RUNNING -> SUCCEEDED
        self.assertEqual(sm.get_state(), TransferState.SUCCEEDED)

    def test_failed_transfer(self):
        sm = StateMachine()
        sm.trigger("start")
        sm.trigger("fail")
        self.assertEqual(sm.get_state(), TransferState.FAILED)

    def test_error_before_start(self):
        sm = StateMachine()
        sm.trigger("error")
        self.assertEqual(sm.get_state(), TransferState.FAILED)

    def test_finished_states_are_terminal(self):
        sm = StateMachine()
        sm.trigger("start")
        sm.trigger("succeed")

        with self.assertRaises(IllegalStateSwitchException) as ctx:
            sm.trigger("start")

        self.assertEqual(ctx.exception.valid_events, set())

    def test_pending_to_invalid_state(self):
        sm: StateMachine = StateMachine()

        self.assertRaises(IllegalStateSwitchException, lambda: sm.trigger("succeed"))

    def test_invalid_event_lists_valid_ones(self):
        sm = StateMachine()
        sm.trigger("start")

        with self.assertRaises(IllegalStateSwitchException) as ctx:
            sm.trigger("start")

        self.assertEqual(ctx.exception.state, TransferState.RUNNING)
        self.assertIn("succeed", ctx.exception.valid_events)


if __name__ == "__main__":
    unittest.main()
