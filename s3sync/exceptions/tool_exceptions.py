class MissingToolException(Exception):
    def __init__(self, tool: str):
        self.tool: str = tool
        super().__init__(f"Could not find `{tool}`!")
