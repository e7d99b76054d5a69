"""Shared fixtures for the XER parser tests."""
from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))


def xer(*lines: str) -> str:
    return "\n".join(lines) + "\n"


SAMPLE_XER = xer(
    "ERMHDR\t19.12\t2023-08-14\tProject\tadmin",
    "%T\tPROJECT",
    "%F\tproj_id\tproj_short_name\tplan_start_date\tplan_end_date\tlast_recalc_date",
    "%R\tP1\tTower A\t2023-08-01 08:00\t2024-03-29 17:00\t2023-08-11 00:00",
    "%T\tPROJWBS",
    "%F\twbs_id\tproj_id\tparent_wbs_id\twbs_short_name\twbs_name\tseq_num",
    "%R\tW2\tP1\tW1\tSUB\tSubstructure\t20",
    "%R\tW1\tP1\t\tTWR\tTower A\t10",
    "%R\tW3\tP1\tW1\tSUP\tSuperstructure\t30",
    "%T\tTASK",
    "%F\ttask_id\tproj_id\twbs_id\ttask_code\ttask_name\tstatus_code\tphys_complete_pct"
    "\ttarget_start_date\ttarget_end_date\tremain_drtn_hr_cnt\ttotal_float_hr_cnt"
    "\tdriving_path_flag\ttask_type",
    "%R\tT1\tP1\tW2\tA1000\tExcavate\tTK_Complete\t100\t2023-08-01 08:00\t2023-08-10 17:00"
    "\t0\t0\tY\tTT_Task",
    "%R\tT2\tP1\tW2\tA1010\tPour Foundation\tTK_Active\t40\t2023-08-11 08:00\t2023-08-25 17:00"
    "\t40\t-8\tY\tTT_Task",
    "%R\tT3\tP1\tW3\tA2000\tErect Steel\tTK_NotStart\t0\t2023-08-28 08:00\t2023-10-06 17:00"
    "\t240\t16\tN\tTT_Task",
    "%T\tTASKPRED",
    "%F\ttask_pred_id\ttask_id\tpred_task_id\tproj_id\tpred_type\tlag_hr_cnt",
    "%R\tR1\tT2\tT1\tP1\tPR_FS\t0",
    "%R\tR2\tT3\tT2\tP1\tPR_SS\t16",
    "%R\tR3\tT3\tT9\tP1\tPR_FF\t0",
    "%R\tR4\tT3\tT1\tP1\tPR_XX\t0",
    "%E",
)


@pytest.fixture
def sample_xer() -> str:
    return SAMPLE_XER


@pytest.fixture
def sample_xer_file(tmp_path: Path) -> Path:
    path = tmp_path / "tower.xer"
    path.write_text(SAMPLE_XER, encoding="utf-8")
    return path
