import io
import json
import tempfile
import unittest

from rich.console import Console

from s3_deploy_cli.adapters.aws.cli_runner import AwsCliRunner
from s3_deploy_cli.adapters.aws.cloudformation_adapter import StackLookupError
from s3_deploy_cli.adapters.aws.deploy_orchestrator import DeployOrchestrator
from s3_deploy_cli.config import DeployConfig
from s3_deploy_cli.core.base_runner import BaseCommandRunner
from s3_deploy_cli.core.models import CommandResult, StackOutput, Status, SyncMode
from s3_deploy_cli.utils.log import ConsoleLog


class FakeRunner(BaseCommandRunner):
    """Replays canned results and records every argument list."""
    binary = "aws"

    def __init__(self, *results: CommandResult):
        self.results = list(results)
        self.calls = []

    def run(self, args):
        self.calls.append(list(args))
        return self.results.pop(0) if self.results else CommandResult("", "", 0)


def ok(stdout: str = "") -> CommandResult:
    return CommandResult(stdout=stdout, stderr="", exit_status=0)


def failed(stderr: str) -> CommandResult:
    return CommandResult(stdout="", stderr=stderr, exit_status=255)


LISTING_WITH_MATCH = json.dumps({
    "DistributionList": {
        "Items": [
            {"Id": "E2OTHER", "Origins": {"Items": [{"DomainName": "other.s3.amazonaws.com"}]}},
            {"Id": "EDFDVBD6EXAMPLE", "Origins": {"Items": [{"DomainName": "my-bucket.s3.amazonaws.com"}]}},
        ]
    }
})


class OrchestratorTestCase(unittest.TestCase):
    def setUp(self):
        self.output = io.StringIO()
        self.log = ConsoleLog(out=Console(file=self.output, width=200, color_system=None), verbose=True)

    def make(self, runner=None, fetch_outputs=None, **config) -> DeployOrchestrator:
        config.setdefault("bucket_name", "my-bucket")
        kwargs = {"fetch_outputs": fetch_outputs} if fetch_outputs else {}
        return DeployOrchestrator(DeployConfig(**config), runner=runner or FakeRunner(), log=self.log, **kwargs)

    @property
    def logged(self) -> str:
        return self.output.getvalue()


class TestSyncDirectory(OrchestratorTestCase):
    def setUp(self):
        super().setUp()
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.build_dir = tmp.name

    def test_success_when_no_error_text(self):
        runner = FakeRunner(ok("upload: build/index.html to s3://my-bucket/index.html\n"))

        result = self.make(runner, dist_folder=self.build_dir).sync_directory()

        self.assertEqual(result.status, Status.SUCCESS)
        self.assertEqual(runner.calls, [["s3", "sync", f"{self.build_dir}/", "s3://my-bucket/"]])
        self.assertIn("upload: build/index.html", self.logged)
        self.assertIn("Successfully synced to the S3 bucket", self.logged)

    def test_error_text_is_logged_and_not_raised(self):
        runner = FakeRunner(failed("Could not connect to the endpoint URL"))

        result = self.make(runner, dist_folder=self.build_dir).sync_directory()

        self.assertEqual(result.status, Status.FAILED)
        self.assertTrue(result.failed)
        self.assertIn("Could not connect to the endpoint URL", self.logged)
        self.assertNotIn("Successfully synced", self.logged)

    def test_copy_mode_with_default_folder_name(self):
        runner = FakeRunner(ok())

        self.make(runner, dist_folder=self.build_dir, sync_mode=SyncMode.COPY).sync_directory()

        self.assertEqual(runner.calls[0][:2], ["s3", "cp"])
        self.assertEqual(runner.calls[0][-1], "--recursive")

    def test_missing_directory_skips_the_command(self):
        runner = FakeRunner()

        result = self.make(runner, dist_folder=f"{self.build_dir}/does-not-exist").sync_directory()

        self.assertEqual(result.status, Status.FAILED)
        self.assertEqual(runner.calls, [])
        self.assertIn("does not exist", self.logged)


class TestWipeBucket(OrchestratorTestCase):
    def test_recursive_delete_of_whole_bucket(self):
        runner = FakeRunner(ok("delete: s3://my-bucket/index.html\n"))

        result = self.make(runner).wipe_bucket()

        self.assertEqual(result.status, Status.SUCCESS)
        self.assertEqual(runner.calls, [["s3", "rm", "s3://my-bucket", "--recursive"]])
        self.assertIn("Successfully wiped the S3 bucket", self.logged)

    def test_failure_is_reported(self):
        result = self.make(FakeRunner(failed("AccessDenied"))).wipe_bucket()
        self.assertEqual(result.status, Status.FAILED)
        self.assertEqual(result.message, "AccessDenied")


class TestInvalidateCache(OrchestratorTestCase):
    def test_single_match_invalidates_all_paths(self):
        runner = FakeRunner(ok(LISTING_WITH_MATCH), ok('{"Invalidation": {"Id": "I2J0I21PCUYOIK"}}'))

        result = self.make(runner).invalidate_cache()

        self.assertEqual(result.status, Status.SUCCESS)
        self.assertEqual(result.detail, "EDFDVBD6EXAMPLE")
        self.assertEqual(runner.calls[0], ["cloudfront", "list-distributions", "--output", "json"])
        self.assertEqual(
            runner.calls[1],
            ["cloudfront", "create-invalidation", "--distribution-id", "EDFDVBD6EXAMPLE", "--paths", "/*"],
        )
        self.assertIn("DistId: EDFDVBD6EXAMPLE", self.logged)
        self.assertIn("I2J0I21PCUYOIK", self.logged)

    def test_no_match_reports_not_found_without_invalidating(self):
        listing = json.dumps({"DistributionList": {"Items": [
            {"Id": "E2OTHER", "Origins": {"Items": [{"DomainName": "other.s3.amazonaws.com"}]}},
        ]}})
        runner = FakeRunner(ok(listing))

        result = self.make(runner).invalidate_cache()

        self.assertEqual(result.status, Status.NOT_FOUND)
        self.assertEqual(len(runner.calls), 1)
        self.assertIn("DistId not found!", self.logged)

    def test_empty_account_is_not_found(self):
        runner = FakeRunner(ok('{"DistributionList": {"Quantity": 0}}'))

        result = self.make(runner).invalidate_cache()

        self.assertEqual(result.status, Status.NOT_FOUND)
        self.assertEqual(len(runner.calls), 1)

    def test_listing_failure_stops_the_operation(self):
        runner = FakeRunner(failed("An error occurred (AccessDenied) when calling ListDistributions"))

        result = self.make(runner).invalidate_cache()

        self.assertEqual(result.status, Status.FAILED)
        self.assertEqual(len(runner.calls), 1)
        self.assertIn("AccessDenied", self.logged)

    def test_malformed_listing_is_a_failure_not_an_exception(self):
        runner = FakeRunner(ok("<html>not json</html>"))

        result = self.make(runner).invalidate_cache()

        self.assertEqual(result.status, Status.FAILED)
        self.assertEqual(len(runner.calls), 1)

    def test_wrong_shaped_listing_is_a_failure_not_an_exception(self):
        for payload in ('{"DistributionList": ["x"]}', '{"DistributionList": {"Items": "x"}}'):
            with self.subTest(payload=payload):
                runner = FakeRunner(ok(payload))

                result = self.make(runner).invalidate_cache()

                self.assertEqual(result.status, Status.FAILED)
                self.assertEqual(len(runner.calls), 1)

    def test_wrong_shaped_entries_are_not_found(self):
        for payload in (
            '{"DistributionList": {"Items": [null]}}',
            '{"DistributionList": {"Items": [{"Id": "E1", "Origins": "oops"}]}}',
            '{"DistributionList": {"Items": [{"Id": "E1", "Origins": {"Items": ["my-bucket.s3.amazonaws.com"]}}]}}',
        ):
            with self.subTest(payload=payload):
                runner = FakeRunner(ok(payload))

                result = self.make(runner).invalidate_cache()

                self.assertEqual(result.status, Status.NOT_FOUND)
                self.assertEqual(len(runner.calls), 1)

    def test_multiple_matches_use_first_and_warn(self):
        listing = json.dumps({"DistributionList": {"Items": [
            {"Id": "EFIRST", "Origins": {"Items": [{"DomainName": "my-bucket.s3.amazonaws.com"}]}},
            {"Id": "ESECOND", "Origins": {"Items": [{"DomainName": "my-bucket.s3.amazonaws.com"}]}},
        ]}})
        runner = FakeRunner(ok(listing), ok("{}"))

        result = self.make(runner).invalidate_cache()

        self.assertEqual(result.detail, "EFIRST")
        self.assertEqual(runner.calls[1][3], "EFIRST")
        self.assertIn("ignoring ESECOND", self.logged)

    def test_invalidation_error_text_is_a_failure(self):
        runner = FakeRunner(ok(LISTING_WITH_MATCH), failed("TooManyInvalidationsInProgress"))

        result = self.make(runner).invalidate_cache()

        self.assertEqual(result.status, Status.FAILED)
        self.assertIn("TooManyInvalidationsInProgress", self.logged)

    def test_silent_invalidation_counts_as_success(self):
        runner = FakeRunner(ok(LISTING_WITH_MATCH), ok(""))

        result = self.make(runner).invalidate_cache()

        self.assertEqual(result.status, Status.SUCCESS)


class TestDomainInfo(OrchestratorTestCase):
    def fetcher(self, outputs):
        calls = []

        def fetch(stack_name, region, profile):
            calls.append((stack_name, region, profile))
            return outputs

        fetch.calls = calls
        return fetch

    def test_reports_domain_from_stack_outputs(self):
        fetch = self.fetcher([StackOutput("WebsiteDistribution", "d111111abcdef8.cloudfront.net")])

        result = self.make(fetch_outputs=fetch, service="web", stage="prod", region="eu-west-1").domain_info()

        self.assertEqual(result.status, Status.SUCCESS)
        self.assertEqual(result.detail, "d111111abcdef8.cloudfront.net")
        self.assertEqual(fetch.calls, [("web-prod", "eu-west-1", None)])
        self.assertIn("Web App Domain: d111111abcdef8.cloudfront.net", self.logged)

    def test_scheme_prefix_and_custom_key(self):
        fetch = self.fetcher([StackOutput("WebAppCloudFrontDistributionOutput", "d2.cloudfront.net")])

        result = self.make(
            fetch_outputs=fetch,
            service="web",
            output_key="WebAppCloudFrontDistributionOutput",
            domain_scheme="https://",
        ).domain_info()

        self.assertEqual(result.detail, "https://d2.cloudfront.net")

    def test_explicit_stack_name_wins(self):
        fetch = self.fetcher([])

        self.make(fetch_outputs=fetch, service="web", stack_name="custom-stack").domain_info()

        self.assertEqual(fetch.calls[0][0], "custom-stack")

    def test_not_found_cases(self):
        for outputs in (
            [],
            [StackOutput("ServiceEndpoint", "https://api.example.com")],
            [StackOutput("WebsiteDistribution", "")],
        ):
            with self.subTest(outputs=outputs):
                result = self.make(fetch_outputs=self.fetcher(outputs), service="web").domain_info()
                self.assertEqual(result.status, Status.NOT_FOUND)
                self.assertEqual(result.message, "Web App Domain: Not Found")

    def test_lookup_error_is_reported(self):
        def fetch(stack_name, region, profile):
            raise StackLookupError("ValidationError: Stack with id web-dev does not exist")

        result = self.make(fetch_outputs=fetch, service="web").domain_info()

        self.assertEqual(result.status, Status.FAILED)
        self.assertIn("does not exist", self.logged)

    def test_missing_service_is_reported(self):
        fetch = self.fetcher([])

        result = self.make(fetch_outputs=fetch).domain_info()

        self.assertEqual(result.status, Status.FAILED)
        self.assertEqual(fetch.calls, [])


class TestDefaultRunner(unittest.TestCase):
    def test_aws_cli_runner_gets_profile_and_region(self):
        orchestrator = DeployOrchestrator(DeployConfig(bucket_name="b", region="eu-west-1", profile="p"))

        self.assertIsInstance(orchestrator.runner, AwsCliRunner)
        self.assertEqual(orchestrator.runner.region, "eu-west-1")
        self.assertEqual(orchestrator.runner.profile, "p")
        self.assertEqual(
            orchestrator.runner.build_command(["s3", "ls"]),
            [orchestrator.runner.binary, "--profile", "p", "--region", "eu-west-1", "s3", "ls"],
        )


class TestRunCommand(OrchestratorTestCase):
    def test_runs_registered_hooks(self):
        runner = FakeRunner(failed("boom"))

        results = self.make(runner).run("wipeS3")

        self.assertEqual([r.operation for r in results], ["wipeS3"])
        self.assertEqual(results[0].status, Status.FAILED)

    def test_unknown_command_raises(self):
        with self.assertRaises(ValueError):
            self.make().run("deploy")


if __name__ == '__main__':
    unittest.main()
