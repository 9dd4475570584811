import datetime as dt
import textwrap
import unittest

from hypothesis import given
from hypothesis.strategies import composite, integers, lists, sampled_from, text

from qview.interpret import JobStatus
from qview.parse import (
    FIELD_COUNT,
    LOAD,
    NAME,
    parse_job_detail,
    parse_job_line,
    parse_job_listing,
    parse_node_status,
)

LISTING = textwrap.dedent(
    """\
    job-ID  prior   name       user         state submit/start at     queue                          slots ja-task-ID
    -----------------------------------------------------------------------------------------------------------------
       4242 5.50000 sim        alice        r     01/02/2020 03:04:05 long@d12chas042.crc.nd.edu         4
       4243 0.00000 wait       bob          qw    01/03/2020 10:00:00                                    24

    """
)

DETAIL = textwrap.dedent(
    """\
    <?xml version='1.0'?>
    <detailed_job_info xmlns:xsd="http://arc.liv.ac.uk/repos/darcs/sge/source/dist/util/resources/schemas/qstat/detailed_job_info.xsd">
      <djob_info>
        <element>
          <JB_job_number>4242</JB_job_number>
          <JB_job_name>simulation_with_a_long_name</JB_job_name>
          <JB_hard_queue_list>
            <destin_ident_list>
              <QR_name>*@@westerink_d12chas_1488</QR_name>
            </destin_ident_list>
          </JB_hard_queue_list>
          <JB_pe_range>
            <ranges>
              <RN_min>4</RN_min>
              <RN_max>4</RN_max>
              <RN_step>1</RN_step>
            </ranges>
          </JB_pe_range>
          <JB_ja_tasks>
            <ulong_sublist>
              <JAT_granted_destin_identifier_list>
                <element>
                  <JG_qname>long@d12chas041.crc.nd.edu</JG_qname>
                  <JG_qhostname>d12chas041.crc.nd.edu</JG_qhostname>
                  <JG_slots>2</JG_slots>
                </element>
                <element>
                  <JG_qname>long@d12chas042.crc.nd.edu</JG_qname>
                  <JG_qhostname>d12chas042.crc.nd.edu</JG_qhostname>
                  <JG_slots>2</JG_slots>
                </element>
              </JAT_granted_destin_identifier_list>
              <JAT_task_list>
                <element>
                  <PET_id>1.d12chas041</PET_id>
                </element>
              </JAT_task_list>
            </ulong_sublist>
          </JB_ja_tasks>
          <JB_ja_structure>
            <task_id_range>
              <RN_min>1</RN_min>
              <RN_max>1</RN_max>
              <RN_step>1</RN_step>
            </task_id_range>
          </JB_ja_structure>
        </element>
      </djob_info>
    </detailed_job_info>
    """
)

NODE_STATUS = textwrap.dedent(
    """\
    queuename                      qtype resv/used/tot. load_avg arch          states
    ---------------------------------------------------------------------------------
    long@d12chas041.crc.nd.edu     BIP   0/24/24        24.02    lx-amd64
    long@d12chas042.crc.nd.edu     BIP   0/0/24         0.01     lx-amd64      d

    """
)


@composite
def job_lines(draw):
    number = draw(integers(1, 10**7))
    user = draw(text(alphabet="abcdefghijklmnopqrstuvwxyz", min_size=1, max_size=8))
    state = draw(sampled_from(["r", "qw", "hqw", "Eqw", "dr", "zz"]))
    node = draw(integers(0, 999))
    line = f"{number} 0.5 job {user} {state} 01/02/2020 03:04:05 long@d12chas{node:03d}.crc.nd.edu 4"
    return (line, number, user, node)


class TestJobListing(unittest.TestCase):
    def test_listing(self):
        jobs = parse_job_listing(LISTING)
        self.assertEqual([j.number for j in jobs], [4242, 4243])
        self.assertEqual(jobs[0].status, JobStatus.RUNNING)
        self.assertEqual(jobs[1].status, JobStatus.PENDING)
        self.assertEqual(jobs[0].core_name, "d12chas")
        self.assertEqual(jobs[0].core_number, 42)

    def test_header_only(self):
        self.assertEqual(parse_job_listing(""), [])
        self.assertEqual(parse_job_listing("header\n----\n"), [])

    def test_full_line(self):
        job = parse_job_line(
            "4242 5.5 sim alice r 01/02/2020 03:04:05 long@d12chas042.crc.nd.edu 4"
        )
        self.assertEqual(job.number, 4242)
        self.assertEqual(job.priority, 5.5)
        self.assertEqual(job.name, "sim")
        self.assertEqual(job.user, "alice")
        self.assertEqual(job.status_token, "r")
        self.assertEqual(
            job.time, dt.datetime(2020, 1, 2, 3, 4, 5, tzinfo=dt.timezone.utc)
        )
        self.assertEqual(job.host, "long@d12chas042.crc.nd.edu")

    def test_truncated_line(self):
        job = parse_job_line("4242 5.5 sim")
        self.assertEqual(job.number, 4242)
        self.assertEqual(job.name, "sim")
        self.assertEqual(job.user, "")
        self.assertEqual(job.status, JobStatus.UNKNOWN)
        self.assertIsNone(job.time)
        self.assertEqual(job.core_name, "")
        self.assertEqual(job.core_number, -1)

    def test_unparsable_numbers(self):
        job = parse_job_line("abc xyz sim alice r")
        self.assertEqual(job.number, 0)
        self.assertEqual(job.priority, 0.0)

    @given(job_lines())
    def test_generated_lines(self, t):
        line, number, user, node = t
        job = parse_job_line("   " + line.replace(" ", "   "))
        self.assertEqual(job.number, number)
        self.assertEqual(job.user, user)
        self.assertEqual(job.core_number, node)


class TestJobDetail(unittest.TestCase):
    def test_detail(self):
        detail = parse_job_detail(DETAIL)
        self.assertEqual(detail.queue_name, "@@westerink_d12chas_1488")
        self.assertEqual(detail.slots, 4)
        self.assertEqual(detail.job_name, "simulation_with_a_long_name")
        self.assertEqual(detail.node_indices, [41, 42])

    def test_first_slot_count_wins(self):
        s = "<a><RN_max>8</RN_max><RN_max>1</RN_max></a>"
        self.assertEqual(parse_job_detail(s).slots, 8)

    def test_unparsable_slot_count(self):
        s = "<a><RN_max>many</RN_max><RN_max>1</RN_max></a>"
        self.assertEqual(parse_job_detail(s).slots, 0)

    def test_queue_name_without_marker(self):
        s = "<a><QR_name>@@westerink_graphics</QR_name></a>"
        self.assertEqual(parse_job_detail(s).queue_name, "@@westerink_graphics")

    def test_placement_falls_back_to_one_digit(self):
        s = "<a><JG_qhostname>proteus2.crc.nd.edu</JG_qhostname><PET_id>1.node</PET_id></a>"
        self.assertEqual(parse_job_detail(s).node_indices, [2])

    def test_malformed_keeps_prefix(self):
        s = "<a><QR_name>*q1</QR_name><RN_max>4</RN_max><JB_job_name>x</oops>"
        detail = parse_job_detail(s)
        self.assertEqual(detail.queue_name, "q1")
        self.assertEqual(detail.slots, 4)
        self.assertEqual(detail.job_name, "")

    def test_empty(self):
        detail = parse_job_detail("")
        self.assertEqual(detail.queue_name, "")
        self.assertEqual(detail.slots, 0)
        self.assertEqual(detail.job_name, "")
        self.assertEqual(detail.node_indices, [])

    @given(lists(integers(0, 999), max_size=8))
    def test_granted_hosts_in_order(self, nodes):
        elements = "".join(
            [f"<JG_qhostname>d12chas{n:03d}.crc.nd.edu</JG_qhostname>" for n in nodes]
        )
        detail = parse_job_detail(f"<a>{elements}</a>")
        self.assertEqual(detail.node_indices, list(dict.fromkeys(nodes)))


class TestNodeStatus(unittest.TestCase):
    def test_node_status(self):
        df = parse_node_status(NODE_STATUS)
        self.assertEqual(list(df.columns), [NAME, LOAD, FIELD_COUNT])
        self.assertEqual(len(df), 4)

        row = df[df[NAME] == "long@d12chas041.crc.nd.edu"].iloc[0]
        self.assertEqual(row[LOAD], "0/24/24")
        self.assertEqual(row[FIELD_COUNT], 5)

        row = df[df[NAME] == "long@d12chas042.crc.nd.edu"].iloc[0]
        self.assertEqual(row[FIELD_COUNT], 6)

    def test_empty(self):
        df = parse_node_status("")
        self.assertTrue(df.empty)
        self.assertEqual(list(df.columns), [NAME, LOAD, FIELD_COUNT])

    def test_short_line(self):
        df = parse_node_status("long@d12chas041")
        self.assertEqual(df.iloc[0][LOAD], "")
        self.assertEqual(df.iloc[0][FIELD_COUNT], 1)
