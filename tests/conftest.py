import pytest

from adapterremoval.config import RunConfiguration
from adapterremoval.pipeline import PairedEndOutputs, SingleEndOutputs
from utils import ListWriter


@pytest.fixture
def single_end_outputs():
    return SingleEndOutputs(output=ListWriter(), discarded=ListWriter())


@pytest.fixture
def paired_end_outputs():
    return PairedEndOutputs(
        output1=ListWriter(),
        output2=ListWriter(),
        singleton=ListWriter(),
        collapsed=ListWriter(),
        collapsed_truncated=ListWriter(),
        discarded=ListWriter(),
    )


@pytest.fixture
def make_config(tmp_path):
    """Build a RunConfiguration whose output files are placed in tmp_path"""

    def _make_config(**kwargs):
        kwargs.setdefault("basename", str(tmp_path / "your_output"))
        kwargs.setdefault("seed", 1234)
        return RunConfiguration(**kwargs)

    return _make_config
