import io
import os
import tempfile
from unittest import TestCase
from unittest.mock import MagicMock, patch

from botocore.exceptions import ClientError

from bapi_analyzer.document_source import (
    file_label,
    get_bucket,
    get_region,
    get_s3,
    read_local_text,
    s3_get_text,
)
from bapi_analyzer.errors import ParseError, SourceIsDirectoryError, SourceNotFoundError


class LocalSourceTests(TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def test_reads_file(self):
        path = os.path.join(self.tmp.name, "bapi.json")
        with open(path, "w", encoding="utf-8") as f:
            f.write('{"a": 1}')
        self.assertEqual(read_local_text(path), '{"a": 1}')

    def test_strips_byte_order_mark(self):
        path = os.path.join(self.tmp.name, "bom.json")
        with open(path, "wb") as f:
            f.write(b'\xef\xbb\xbf{"a": 1}')
        self.assertEqual(read_local_text(path), '{"a": 1}')

    def test_missing_file(self):
        with self.assertRaises(SourceNotFoundError):
            read_local_text(os.path.join(self.tmp.name, "nope.json"))

    def test_directory(self):
        with self.assertRaises(SourceIsDirectoryError):
            read_local_text(self.tmp.name)

    def test_binary_file(self):
        path = os.path.join(self.tmp.name, "blob.json")
        with open(path, "wb") as f:
            f.write(b"\xff\xfe\x00garbage")
        with self.assertRaises(ParseError):
            read_local_text(path)

    def test_file_label(self):
        self.assertEqual(file_label("/data/exports/bapi.json"), "bapi.json")
        self.assertEqual(file_label("exports/bapi.json"), "bapi.json")
        self.assertEqual(file_label("bapi.json"), "bapi.json")


class S3SourceTests(TestCase):
    @patch.dict(os.environ, {}, clear=True)
    def test_missing_env(self):
        with self.assertRaises(RuntimeError):
            get_bucket()
        with self.assertRaises(RuntimeError):
            get_region()

    @patch.dict(os.environ, {"S3_BUCKET": "b", "AWS_REGION": "eu-central-1"}, clear=True)
    @patch("bapi_analyzer.document_source.boto3.client")
    def test_client_uses_region(self, mock_client):
        self.assertEqual(get_bucket(), "b")
        get_s3()
        args, kwargs = mock_client.call_args
        self.assertEqual(args, ("s3",))
        self.assertEqual(kwargs["region_name"], "eu-central-1")

    def test_get_text(self):
        s3 = MagicMock()
        s3.get_object.return_value = {"Body": io.BytesIO(b'{"p": 1}')}
        self.assertEqual(s3_get_text(s3, "b", "exports/bapi.json"), '{"p": 1}')
        s3.get_object.assert_called_once_with(Bucket="b", Key="exports/bapi.json")

    def test_missing_key(self):
        s3 = MagicMock()
        s3.get_object.side_effect = ClientError({"Error": {"Code": "NoSuchKey", "Message": "gone"}}, "GetObject")
        with self.assertRaises(SourceNotFoundError):
            s3_get_text(s3, "b", "missing.json")

    def test_other_client_errors_propagate(self):
        s3 = MagicMock()
        s3.get_object.side_effect = ClientError({"Error": {"Code": "AccessDenied", "Message": "no"}}, "GetObject")
        with self.assertRaises(ClientError):
            s3_get_text(s3, "b", "secret.json")
