import os
import sys
import subprocess
import shutil

APP_NAME = "RemoteReg"
ENTRY_POINT = "main.py"
ICON_FILE = None
ONE_FILE = True
# Loaded lazily by cli.main, so PyInstaller cannot see them.
HIDDEN_IMPORTS = ["core.winreg_transport", "win32service", "win32serviceutil"]

def clean_build():
    dirs_to_clean = ['build', 'dist']
    for d in dirs_to_clean:
        if os.path.exists(d):
            shutil.rmtree(d)
    print(f"[CLEAN] Directories {dirs_to_clean} removed.")

def build():
    print(f"[BUILD] Initializing packaging of {APP_NAME}...")

    cmd = [
        sys.executable,
        "-m",
        "PyInstaller",
        "--name", APP_NAME,
        "--clean"
    ]

    if ONE_FILE:
        cmd.append("--onefile")

    if ICON_FILE:
        cmd.extend(["--icon", ICON_FILE])

    for module in HIDDEN_IMPORTS:
        cmd.extend(["--hidden-import", module])

    cmd.append(ENTRY_POINT)

    print(f"[CMD] Executing: {' '.join(cmd)}")

    subprocess.run(cmd, check=True)
    print(f"[BUILD] Completed. Check the 'dist' folder.")

if __name__ == "__main__":
    clean_build()
    build()
