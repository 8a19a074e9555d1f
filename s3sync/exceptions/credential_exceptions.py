class CredentialCheckException(Exception):
    def __init__(self, command: str, output: str):
        self.command: str = command
        self.output: str = output
        super().__init__(f"Our attempt to call `{command}` failed.")
