#make it true if you want the logs
logs_on = False


def log(*args):
    if logs_on:
        print(*args)


def set_logs(flag):
    global logs_on
    logs_on = bool(flag)


def toggle_logs():
    set_logs(not logs_on)
    # printed after the switch so turning logs on is visible
    log("logsOn:", logs_on)
    return logs_on
