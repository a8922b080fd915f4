from unittest import TestCase
from unittest.mock import patch

from cloudsync import command
from cloudsync.exceptions import SubscriptionRequiredError
from cloudsync.games import GameIdentity


class TestCommandLine(TestCase):
    def test_parse_upload(self):
        args = command.get_parser().parse_args(["upload", "steam", "123", "--automatic"])
        self.assertEqual(args.command, "upload")
        self.assertEqual(args.shop, "steam")
        self.assertEqual(args.object_id, "123")
        self.assertTrue(args.automatic)
        self.assertIsNone(args.label)

    def test_label_and_automatic_exclude_each_other(self):
        with self.assertRaises(SystemExit):
            command.get_parser().parse_args(["upload", "steam", "123", "--automatic", "--label", "x"])

    @patch("cloudsync.command.CloudSync")
    def test_upload_with_automatic_label(self, mock_cloud_sync):
        mock_cloud_sync.get_backup_label.return_value = "Automatic backup from now"
        self.assertEqual(command.main(["upload", "steam", "123", "--automatic"]), 0)
        mock_cloud_sync.get_backup_label.assert_called_once_with(True)
        mock_cloud_sync.return_value.upload_save_game.assert_called_once_with(
            "123",
            "steam",
            download_option_title=None,
            label="Automatic backup from now",
            on_progress=command.print_progress,
        )

    @patch("cloudsync.command.CloudSync")
    def test_errors_give_exit_status(self, mock_cloud_sync):
        mock_cloud_sync.return_value.upload_save_game.side_effect = SubscriptionRequiredError()
        self.assertEqual(command.main(["upload", "steam", "123", "--label", "mine"]), 1)

    @patch("cloudsync.command.CloudSync")
    def test_invalid_game_gives_exit_status(self, mock_cloud_sync):
        def upload_save_game(object_id, shop, **_kwargs):
            GameIdentity(shop=shop, object_id=object_id)

        mock_cloud_sync.return_value.upload_save_game.side_effect = upload_save_game
        self.assertEqual(command.main(["upload", "a/b", "1", "--label", "mine"]), 1)

    @patch("cloudsync.command.CloudSync")
    def test_home_dir(self, mock_cloud_sync):
        mock_cloud_sync.return_value.get_windows_like_user_profile_path.return_value = "C:/users/steamuser"
        with patch("builtins.print") as mock_print:
            self.assertEqual(command.main(["home-dir", "--wine-prefix", "/prefix"]), 0)
        mock_cloud_sync.return_value.get_windows_like_user_profile_path.assert_called_once_with("/prefix")
        mock_print.assert_called_once_with("C:/users/steamuser")
