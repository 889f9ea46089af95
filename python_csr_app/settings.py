import os

from enums import DuplicatePolicy

DEFAULT_OUTPUT_DIR = "outputs"


class Settings:
    def __init__(self):
        self._output_dir = DEFAULT_OUTPUT_DIR
        self._duplicate_policy = DuplicatePolicy.LAST_WINS

    @classmethod
    def from_environment(cls, environ=None):
        """Defaults overridden by CSR_OUTPUT_DIR and CSR_STRICT_DUPLICATES."""
        if environ is None:
            environ = os.environ

        settings = cls()
        output_dir = environ.get("CSR_OUTPUT_DIR", "").strip()
        if output_dir:
            settings.set_output_dir(output_dir)
        if environ.get("CSR_STRICT_DUPLICATES", "").strip().lower() in ("1", "true", "yes"):
            settings.set_duplicate_policy(DuplicatePolicy.REJECT)
        return settings

    def set_output_dir(self, s_output_dir):
        self._output_dir = s_output_dir

    def get_output_dir(self):
        return self._output_dir

    def set_duplicate_policy(self, e_policy):
        self._duplicate_policy = e_policy

    def get_duplicate_policy(self):
        return self._duplicate_policy

    def is_strict_duplicates(self):
        return self._duplicate_policy == DuplicatePolicy.REJECT

    def get_duplicate_policy_name(self):
        if self._duplicate_policy == DuplicatePolicy.REJECT:
            return "Reject"
        return "Last write wins"

    def print(self):
        print(f"Output directory: {self._output_dir}")
        print(f"Duplicate entries: {self.get_duplicate_policy_name()}")
