from unittest.mock import patch


class TestMainMenu:
    @patch("shadmanager.cli.app.questionary")
    def test_exit_immediately(self, mock_q):
        from shadmanager.cli.app import main_menu

        mock_q.select.return_value.ask.return_value = "Sair"

        main_menu()
        mock_q.select.return_value.ask.assert_called_once()

    @patch("shadmanager.cli.app.questionary")
    def test_none_exits(self, mock_q):
        from shadmanager.cli.app import main_menu

        mock_q.select.return_value.ask.return_value = None

        main_menu()

    @patch("shadmanager.cli.app.questionary")
    @patch("shadmanager.cli.app.generate_pix_menu")
    def test_generate(self, mock_generate, mock_q):
        from shadmanager.cli.app import main_menu

        mock_q.select.return_value.ask.side_effect = ["Gerar Código PIX", "Sair"]

        main_menu()
        mock_generate.assert_called_once()

    @patch("shadmanager.cli.app.questionary")
    @patch("shadmanager.cli.app.inspect_pix_menu")
    def test_inspect(self, mock_inspect, mock_q):
        from shadmanager.cli.app import main_menu

        mock_q.select.return_value.ask.side_effect = ["Validar Código PIX", "Sair"]

        main_menu()
        mock_inspect.assert_called_once()


class TestMain:
    @patch("shadmanager.__main__.main_menu")
    @patch("shadmanager.__main__.configure_logging")
    def test_configures_logging_then_runs_menu(self, mock_logging, mock_menu):
        from shadmanager.__main__ import main

        main()
        mock_logging.assert_called_once()
        mock_menu.assert_called_once()
