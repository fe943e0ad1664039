from signage.controller.client import ControllerClient, PingOutcome

__all__ = ["ControllerClient", "PingOutcome"]
