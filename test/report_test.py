import textwrap
import unittest
from typing import Dict, List

from qview.config import DEFAULT_CATALOG
from qview.entities import QueueDefinition
from qview.report import CORES, JID, JOB_NAME, METRIC, STATUS, USER, VALUE, StatusReport

HEADER = "job-ID prior name user state submit/start at queue slots\n" + "-" * 40 + "\n"

WIDE = QueueDefinition.from_values(
    "Aegaeon", "@@westerink_d12chas_1488", "d12chas", 41, 102, 24, 3
)
NARROW = QueueDefinition.from_values(
    "Aegaeon", "@@westerink_d12chas_504", "d12chas", 20, 40, 24, 3
)


def detail(queue: str, slots: int, name: str = "", hosts: List[str] = ()) -> str:
    granted = "".join([f"<JG_qhostname>{h}.crc.nd.edu</JG_qhostname>" for h in hosts])
    return textwrap.dedent(
        f"""\
        <detailed_job_info><djob_info><element>
        <JB_job_name>{name}</JB_job_name>
        <QR_name>*{queue}</QR_name>
        <RN_max>{slots}</RN_max>
        {granted}
        </element></djob_info></detailed_job_info>
        """
    )


class FakeQstat:
    def __init__(self, listing: str, details: Dict[int, str], nodes: str = ""):
        self._listing = listing
        self._details = details
        self._nodes = nodes
        self.detail_calls: List[int] = []

    def get_job_listing(self) -> str:
        return self._listing

    def get_job_detail(self, jobid: int) -> str:
        self.detail_calls.append(jobid)
        return self._details.get(jobid, "")

    def get_node_status(self) -> str:
        return self._nodes


class TestStatusReport(unittest.TestCase):
    def test_running_job_end_to_end(self):
        listing = HEADER + (
            "4242 5.5 sim alice r 01/02/2020 03:04:05 long@d12chas042.crc.nd.edu 4\n"
        )
        details = {
            4242: detail("@@westerink_d12chas_1488", 4, hosts=["d12chas041", "d12chas042"])
        }
        nodes = "long@d12chas042.crc.nd.edu BIP 0/4/24 4.0 lx-amd64\n"
        provider = FakeQstat(listing, details, nodes)

        report = StatusReport([WIDE], provider)
        view = report.run(WIDE.hash)

        self.assertIsNotNone(view)
        self.assertEqual(view.queue, WIDE)
        self.assertEqual([j.number for j in view.jobs], [4242])
        self.assertEqual(view.jobs[0].slots, 4)
        self.assertEqual(view.total_jobs, 1)
        self.assertEqual(view.job_count, 1)
        self.assertEqual(view.health.running_cores, 4)
        self.assertEqual(view.health.idle_cores, 20)

    def test_unknown_hash(self):
        report = StatusReport([WIDE], FakeQstat(HEADER, {}))
        self.assertIsNone(report.run("0" * 40))
        self.assertIsNone(report.find("0" * 40))

    def test_catalog_access(self):
        catalog = [QueueDefinition.from_values(*v) for v in DEFAULT_CATALOG]
        report = StatusReport(catalog, FakeQstat(HEADER, {}))
        self.assertEqual(len(report.queues), 7)
        self.assertEqual(report.queue(0), catalog[0])
        self.assertEqual(report.find(catalog[3].hash), catalog[3])

    def test_job_spanning_queues_is_in_each(self):
        listing = HEADER + (
            "7 5.5 sim alice r 01/02/2020 03:04:05 long@d12chas040.crc.nd.edu 48\n"
        )
        details = {7: detail("@@westerink_d12chas_504", 48, hosts=["d12chas040", "d12chas041"])}
        provider = FakeQstat(listing, details)
        report = StatusReport([NARROW, WIDE], provider)

        self.assertEqual([j.number for j in report.run(NARROW.hash).jobs], [7])
        self.assertEqual([j.number for j in report.run(WIDE.hash).jobs], [7])

    def test_running_job_off_every_queue_is_not_looked_up(self):
        listing = HEADER + (
            "8 5.5 sim alice r 01/02/2020 03:04:05 long@d12chas010.crc.nd.edu 4\n"
        )
        provider = FakeQstat(listing, {8: detail("x", 4, hosts=["d12chas050"])})
        view = StatusReport([WIDE, NARROW], provider).run(WIDE.hash)
        self.assertEqual(view.jobs, [])
        self.assertEqual(view.total_jobs, 1)
        self.assertEqual(provider.detail_calls, [])

    def test_pending_job_matches_by_name(self):
        listing = HEADER + (
            "9 0.0 wait bob qw 01/02/2020 03:04:05 24\n"
            "10 0.0 held bob hqw 01/02/2020 03:04:05 24\n"
        )
        details = {
            9: detail("@@westerink_d12chas_1488", 24, name="waiting_for_nodes"),
            10: detail("@@westerink_d12chas_504", 24),
        }
        provider = FakeQstat(listing, details)
        report = StatusReport([WIDE, NARROW], provider)

        view = report.run(WIDE.hash)
        self.assertEqual([j.number for j in view.jobs], [9])
        self.assertEqual(view.jobs[0].name, "waiting_for_nodes")
        self.assertEqual(view.job_count, 1)
        self.assertEqual(sorted(provider.detail_calls), [9, 10])

    def test_unknown_job_is_counted_but_not_shown(self):
        listing = HEADER + (
            "11 0.0 odd bob zz 01/02/2020 03:04:05 long@d12chas042.crc.nd.edu 4\n"
        )
        provider = FakeQstat(listing, {11: detail("@@westerink_d12chas_1488", 4)})
        view = StatusReport([WIDE], provider).run(WIDE.hash)
        self.assertEqual(view.jobs, [])
        self.assertEqual(view.total_jobs, 1)

    def test_frames(self):
        listing = HEADER + (
            "4242 5.5 sim alice r 01/02/2020 03:04:05 long@d12chas042.crc.nd.edu 4\n"
        )
        details = {4242: detail("@@westerink_d12chas_1488", 4, "long_name", ["d12chas042"])}
        view = StatusReport([WIDE], FakeQstat(listing, details)).run(WIDE.hash)

        jobs = view.jobs_to_df()
        self.assertEqual(list(jobs.columns), [JID, JOB_NAME, USER, STATUS, CORES])
        self.assertEqual(jobs.iloc[0].tolist(), [4242, "long_name", "alice", "r", 4])

        health = view.health_to_df()
        self.assertEqual(list(health.columns), [METRIC, VALUE])
        self.assertEqual(len(health), 8)

    def test_empty_snapshot(self):
        view = StatusReport([WIDE], FakeQstat("", {}, "")).run(WIDE.hash)
        self.assertEqual(view.jobs, [])
        self.assertEqual(view.total_jobs, 0)
        self.assertTrue(view.jobs_to_df().empty)
        self.assertEqual(view.health.total_nodes, 0)
