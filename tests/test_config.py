from pathlib import Path
from tempfile import TemporaryDirectory
import unittest

from check_backupexec.config import DEFAULT_SSH_OPTIONS, AppConfig, apply_overrides, load_config


class ConfigTest(unittest.TestCase):
    def test_load_config(self) -> None:
        with TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            config_path = root / "check_backupexec.yaml"
            config_path.write_text(
                """
ssh:
  host: backup01.example.org
  username: monitor
  port: 2222
logging:
  file: "./logs/check_backupexec.log"
""".strip(),
                encoding="utf-8",
            )
            config = load_config(config_path)
            self.assertEqual(config.ssh.host, "backup01.example.org")
            self.assertEqual(config.ssh.username, "monitor")
            self.assertEqual(config.ssh.port, 2222)
            self.assertEqual(config.ssh.timeout_seconds, 60)
            self.assertEqual(config.ssh.identity, "~/.ssh/id_rsa")
            self.assertEqual(config.ssh.ssh_options, DEFAULT_SSH_OPTIONS)
            assert config.logging.file is not None
            self.assertEqual(
                config.logging.file.resolve(),
                (root / "logs" / "check_backupexec.log").resolve(),
            )

    def test_no_config_file(self) -> None:
        config = load_config(None)
        self.assertEqual(config, AppConfig())
        self.assertIsNone(config.logging.file)

    def test_invalid_files(self) -> None:
        with TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "bad.yaml"
            for content in ["- a\n- b\n", "ssh: [1, 2]\n", "ssh:\n  port: twenty\n", "ssh: {host: [\n"]:
                config_path.write_text(content, encoding="utf-8")
                with self.assertRaises(ValueError):
                    load_config(config_path)

    def test_overrides(self) -> None:
        config = apply_overrides(AppConfig(), host="10.0.0.5", username="svc", port=None, password="s3cret")
        self.assertEqual(config.ssh.address, "svc@10.0.0.5")
        self.assertEqual(config.ssh.port, 22)
        self.assertEqual(config.ssh.password, "s3cret")

    def test_identity_override_replaces_configured_password(self) -> None:
        configured = apply_overrides(AppConfig(), host="h", username="u", password="s3cret")
        config = apply_overrides(configured, identity="~/.ssh/backup_key")
        self.assertEqual(config.ssh.identity, "~/.ssh/backup_key")
        self.assertEqual(config.ssh.password, "")

        kept = apply_overrides(configured, port=2222)
        self.assertEqual(kept.ssh.password, "s3cret")

    def test_override_validation(self) -> None:
        with self.assertRaises(ValueError):
            apply_overrides(AppConfig(), username="svc")
        with self.assertRaises(ValueError):
            apply_overrides(AppConfig(), host="h")
        with self.assertRaises(ValueError):
            apply_overrides(AppConfig(), host="h", username="u", port=70000)
        with self.assertRaises(ValueError):
            apply_overrides(AppConfig(), host="h", username="u", timeout_seconds=0)


if __name__ == "__main__":
    unittest.main()
