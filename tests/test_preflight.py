import pytest

from preflight_check import check_ports, check_resources, check_root


@pytest.mark.parametrize("memory", [256, 512, 899])
def test_low_memory_warns_without_exiting(host, memory, capsys):
    host.memory, host.swap = memory, 4096
    warnings = check_resources(host)
    assert len(warnings) == 1
    assert "requires 1GB RAM" in capsys.readouterr().out


@pytest.mark.parametrize("memory", [900, 1200, 1799])
def test_low_swap_warns_below_1800mb(host, memory):
    host.memory, host.swap = memory, 999
    warnings = check_resources(host)
    assert len(warnings) == 1
    assert "2GB of swap" in warnings[0]


@pytest.mark.parametrize("memory", [900, 1799])
def test_enough_swap_no_warning(host, memory):
    host.memory, host.swap = memory, 1000
    assert check_resources(host) == []


def test_low_swap_ignored_with_enough_memory(host):
    host.memory, host.swap = 1800, 0
    assert check_resources(host) == []


@pytest.mark.parametrize("disk", [0, 1000, 4999])
def test_low_disk_is_fatal(host, disk, capsys):
    host.disk = disk
    with pytest.raises(SystemExit) as exc:
        check_resources(host)
    assert exc.value.code == 1
    assert "5GB of *free* disk space" in capsys.readouterr().out


def test_warning_waits_for_enter_on_a_terminal(host, answers):
    host.memory, host.interactive = 512, True
    prompts = answers("")
    check_resources(host)
    assert len(prompts) == 1
    assert "Press ENTER to continue" in prompts[0]


def test_no_wait_without_terminal(host, answers):
    host.memory, host.interactive = 512, False
    prompts = answers()
    check_resources(host)
    assert prompts == []


def test_bound_port_is_fatal(host, capsys):
    host.bound = {443}
    with pytest.raises(SystemExit) as exc:
        check_ports(host)
    assert exc.value.code == 1
    assert "Port 443" in capsys.readouterr().out
    assert host.calls == ["port:80", "port:443"]


def test_free_ports_pass(host):
    check_ports(host, (80, 443, 8080))
    assert host.calls == ["port:80", "port:443", "port:8080"]


def test_root_required(host):
    host.root = False
    with pytest.raises(SystemExit) as exc:
        check_root(host)
    assert exc.value.code == 1
