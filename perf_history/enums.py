from enum import Enum


class Kind(str, Enum):
    FULL_COMPILER = 'rustc'
    BENCHMARKS = 'benchmarks'

    def __str__(self):
        return self.value

    @classmethod
    def from_test_name(cls, test_name: str, full_compiler_name: str = 'rustc') -> 'Kind':
        if test_name == full_compiler_name:
            return cls.FULL_COMPILER
        return cls.BENCHMARKS


class Edge(str, Enum):
    START = 'start'
    END = 'end'

    def __str__(self):
        return self.value
