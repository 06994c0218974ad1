"""Application constants and configuration values."""


class UIConstants:
    """UI-related constants."""

    # Window dimensions
    WINDOW_WIDTH = 880
    WINDOW_HEIGHT = 760
    WINDOW_MIN_WIDTH = 640
    WINDOW_MIN_HEIGHT = 560

    # Refresh intervals (milliseconds)
    INSTALL_PROGRESS_INTERVAL_MS = 250

    # Status dot colours
    STATUS_COLORS = {
        'ok': '#22C55E',
        'warn': '#F59E0B',
        'bad': '#EF4444',
        'idle': '#9CA3AF',
    }

    # Drop area highlight (border, background)
    DROP_VALID_COLORS = ('#2563EB', '#EFF6FF')
    DROP_INVALID_COLORS = ('#DC2626', '#FEF2F2')

    LOG_FONT_SIZE = 9


class PathConstants:
    """File and directory path constants."""

    APP_DATA_DIR_NAME = 'quest_adb_tool'
    LOGS_DIR_NAME = 'logs'
    SESSION_LOG_PREFIX = 'log_'
    SESSION_LOG_EXT = '.txt'

    # Bundled adb directory next to the application
    BUNDLED_ADB_DIR = 'adb'

    APK_EXT = '.apk'


class ADBConstants:
    """ADB-related constants."""

    # Command timeouts (seconds)
    DEFAULT_COMMAND_TIMEOUT = 30
    INSTALL_COMMAND_TIMEOUT = 300
    MIN_COMMAND_TIMEOUT = 1
    MIN_INSTALL_TIMEOUT = 10
    # Bounded wait for output after killing a timed-out process
    KILL_DRAIN_TIMEOUT = 5

    # Device listing markers
    DEVICE_LIST_HEADER = 'list of devices'
    DEVICE_CONNECTED_SUFFIX = '\tdevice'
    DEVICE_UNAUTHORIZED_SUFFIX = '\tunauthorized'
    UNAUTHORIZED_MARKER = 'unauthorized'

    # Install output markers
    INSTALL_SUCCESS_MARKER = 'success'
    INSTALL_FAILURE_PATTERN = r'Failure\s*\[(?P<reason>[^\]]+)\]'

    # Fixed adb sub-commands
    CMD_DEVICES = ('devices',)
    CMD_KILL_SERVER = ('kill-server',)
    CMD_START_SERVER = ('start-server',)

    # Common SDK install locations, tried after PATH
    SDK_ADB_LOCATIONS = {
        'darwin': [
            '~/Library/Android/sdk/platform-tools/adb',
            '/opt/homebrew/bin/adb',
            '/usr/local/bin/adb',
        ],
        'linux': [
            '~/Android/Sdk/platform-tools/adb',
            '/usr/bin/adb',
            '/usr/local/bin/adb',
        ],
        'windows': [
            '~/AppData/Local/Android/Sdk/platform-tools/adb.exe',
        ],
    }


class MessageConstants:
    """User-facing message constants."""

    # Status line
    STATUS_ADB_MISSING = 'ADB is missing. Put adb and its libraries into the "adb" folder next to the application.'
    STATUS_NOT_FOUND = 'No headset detected. Connect it with a data-capable USB cable.'
    STATUS_UNAUTHORIZED = 'Authorization needed. Put on the headset and tap "Allow USB debugging".'
    STATUS_CONNECTED = 'Connected and ready.'
    STATUS_UNKNOWN = 'Status unknown.'

    # Busy messages
    BUSY_REPAIRING = 'Repairing connection...'
    BUSY_INSTALLING = 'Installing app...'
    BUSY_SENDING_TEXT = 'Sending text...'

    # Titles
    TITLE_ADB_MISSING = 'ADB Missing'
    TITLE_DEVICE_NOT_CONNECTED = 'Device Not Connected'
    TITLE_AUTHORIZATION_NEEDED = 'Authorization Needed'
    TITLE_DEVICE_NOT_READY = 'Device Not Ready'
    TITLE_INVALID_APK = 'Invalid APK'
    TITLE_INVALID_DROP = 'Invalid Drop'
    TITLE_NO_TEXT = 'No Text'
    TITLE_INSTALL_DONE = 'Install Complete'
    TITLE_INSTALL_FAILED = 'Install Failed'
    TITLE_OPERATION_FAILED = 'Operation Failed'
    TITLE_BUSY = 'Please Wait'
    TITLE_GUIDE = 'Getting Started'

    # Bodies
    ERROR_ADB_MISSING = (
        'adb was not found.\n\n'
        'Place the following files into the "adb" folder next to the application:\n'
        '- adb (adb.exe on Windows)\n'
        '- AdbWinApi.dll\n'
        '- AdbWinUsbApi.dll\n\n'
        'Alternatively install Android platform-tools and make sure adb is on PATH.'
    )
    WARNING_DEVICE_NOT_CONNECTED = (
        'No headset detected.\n\n'
        'Please check:\n'
        '- the headset is powered on\n'
        '- the USB cable supports data transfer\n'
        '- developer mode is enabled'
    )
    WARNING_DEVICE_UNAUTHORIZED = (
        'The headset is waiting for authorization.\n\n'
        'Put on the headset, tap "Allow USB debugging", then press "Refresh".'
    )
    WARNING_DEVICE_NOT_READY = 'The device state could not be determined. Press "Refresh" and try again.'
    WARNING_INVALID_APK = 'The APK path is invalid. Please choose an existing .apk file.'
    INFO_INVALID_DROP = 'Please drop a single .apk file.'
    INFO_NO_TEXT = 'Please type the text to send first.'
    ERROR_BUSY = 'Another operation is still running.'
    INSTALL_SUCCESS_TEMPLATE = 'Installed: {name}\nElapsed: {elapsed}'
    INSTALL_FAILURE_TEMPLATE = (
        'Install failed: {name}\nElapsed: {elapsed}\n\n'
        'Reason: {reason}\nAdvice: {advice}\n\n'
        'Use "Open Log Folder" to inspect the full output.'
    )
    INSTALL_PROGRESS_TEMPLATE = 'Installing... elapsed {elapsed}'

    GUIDE_TEXT = (
        'Getting started:\n\n'
        '1. Connect the headset to the computer with a data-capable USB cable.\n'
        '2. Put on the headset and tap "Allow USB debugging" (tick "Always allow").\n'
        '3. Back in this tool, once the status says "Connected" you can install apps or send text.\n\n'
        'Common issues:\n'
        '- "Authorization needed": the headset is waiting for you to tap Allow.\n'
        '- Device not found or frequently offline: plug the cable into a USB 2.0 Type-A port '
        'on the motherboard and refresh.'
    )


class InstallAdviceConstants:
    """Remediation advice for known install failure reasons.

    ``ORDERED_ADVICE`` is checked top to bottom against the upper-cased
    install output; the first matching marker decides the advice.
    """

    VERSION_DOWNGRADE = 'The device already has a newer version. Uninstall it first or enable downgrade install.'
    SIGNATURE_MISMATCH = 'Signatures do not match. Uninstall the existing app from the device, then install again.'
    ALREADY_EXISTS = 'An app with the same package name already exists. Uninstall the old version first.'
    CORRUPT_PACKAGE = 'The APK may be corrupt or incomplete. Download it again.'
    INSUFFICIENT_STORAGE = 'Not enough storage on the device. Free up some space.'
    TEST_ONLY = 'This APK is a test-only package. Enable "Allow test APK" to install it.'
    OLDER_SDK = 'The device OS version is too old for this APK.'
    NO_MATCHING_ABIS = 'The APK architecture does not match the device.'
    UNSTABLE_CONNECTION = (
        'The ADB connection is unstable. Prefer a USB 2.0 Type-A port on the motherboard, '
        're-authorize USB debugging and try again.'
    )
    GENERIC = 'Check the ADB output in the log and verify the device connection, authorization and APK source.'

    ORDERED_ADVICE = (
        (('INSTALL_FAILED_VERSION_DOWNGRADE',), VERSION_DOWNGRADE),
        (('INSTALL_FAILED_UPDATE_INCOMPATIBLE',), SIGNATURE_MISMATCH),
        (('INSTALL_FAILED_ALREADY_EXISTS',), ALREADY_EXISTS),
        (('INSTALL_PARSE_FAILED',), CORRUPT_PACKAGE),
        (('INSTALL_FAILED_INSUFFICIENT_STORAGE',), INSUFFICIENT_STORAGE),
        (('INSTALL_FAILED_TEST_ONLY',), TEST_ONLY),
        (('INSTALL_FAILED_OLDER_SDK',), OLDER_SDK),
        (('INSTALL_FAILED_NO_MATCHING_ABIS',), NO_MATCHING_ABIS),
        (('OFFLINE', 'NO DEVICES/EMULATORS FOUND', 'EOF'), UNSTABLE_CONNECTION),
    )

    NO_OUTPUT_REASON = 'no output received'


class LoggingConstants:
    """Logging configuration constants."""

    ROOT_LOGGER_NAME = 'quest_adb_tool'
    DIAGNOSTIC_LOG_PREFIX = 'quest_adb_tool_'
    DIAGNOSTIC_LOG_EXT = '.log'

    # Log levels
    DEFAULT_LOG_LEVEL = 'INFO'
    VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

    # Log format
    FILE_LOG_FORMAT = '%(asctime)s %(trace_id)s %(name)-32s %(levelname)-8s %(message)s'
    CONSOLE_LOG_FORMAT = '%(levelname)s [%(trace_id)s] %(message)s'
    DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

    # Session log line timestamp
    SESSION_TIME_FORMAT = '%H:%M:%S'
    SESSION_FILE_TIME_FORMAT = '%Y%m%d_%H%M%S'


class ApplicationConstants:
    """General application constants."""

    APP_NAME = 'Quest ADB Tool'
    APP_VERSION = '1.0.0'
    APP_DESCRIPTION = 'A PyQt6 helper that installs APKs and sends text to a tethered headset via adb'

    CONFIG_FILE_NAME = '.quest_adb_tool_config.json'
    BACKUP_CONFIG_FILE_NAME = '.quest_adb_tool_config.backup.json'


class PanelText:
    """Shared labels and titles for UI panels."""

    GROUP_STATUS = 'Device Status'
    GROUP_INSTALL = '📦 Install APK'
    GROUP_TEXT = '⌨️ Send Text'
    GROUP_LOG = '📄 Log'

    PLACEHOLDER_APK_PATH = 'Choose or drop an .apk file...'
    PLACEHOLDER_TEXT = 'Text to type on the headset'

    BUTTON_REFRESH = '🔄 Refresh'
    BUTTON_REPAIR = '🛠️ Repair Connection'
    BUTTON_GUIDE = '❓ Guide'
    BUTTON_OPEN_LOG = '📂 Open Log Folder'
    BUTTON_PICK_APK = '📂 Browse'
    BUTTON_INSTALL = '📦 Install'
    BUTTON_SEND_TEXT = '➡️ Send'
    BUTTON_CLEAR_LOG = '🗑️ Clear'
    BUTTON_COPY_LOG = '📋 Copy'

    CHECK_REPLACE = 'Replace existing'
    CHECK_DOWNGRADE = 'Allow downgrade'
    CHECK_TEST_APK = 'Allow test APK'

    LABEL_SUCCESS_BADGE = 'Succeeded {count}'
    LABEL_FAIL_BADGE = 'Failed {count}'
    LABEL_APK_FILE = 'File: {value}'
    LABEL_APK_SIZE = 'Size: {value}'
    LABEL_APK_PACKAGE = 'Package: {value}'
    LABEL_APK_VERSION = 'Version: {value}'
    LABEL_EMPTY_VALUE = '-'

    APK_FILE_FILTER = 'APK Files (*.apk);;All Files (*)'
    APK_DIALOG_TITLE = 'Choose APK'
