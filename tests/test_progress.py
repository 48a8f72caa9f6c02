import io

from tqdm import tqdm

from bhmerger.progress import PhaseProgressBar


def make_bar():
    return PhaseProgressBar(bar=tqdm(total=1000, file=io.StringIO()))


def test_bar_restarts_on_phase_change():
    pb = make_bar()
    pb(100.0, 0.8, "inspiral")
    assert pb.bar.n == 800
    pb(500.0, 0.0, "ringdown")
    assert pb.bar.n == 0 and pb.phase == "ringdown"
    pb(550.0, 0.5, "ringdown")
    assert pb.bar.n == 500
    pb.close()


def test_bar_never_moves_backwards_within_phase():
    pb = make_bar()
    pb(10.0, 0.4, "inspiral")
    pb(20.0, 0.3, "inspiral")
    assert pb.bar.n == 400
    pb(30.0, 1.7, "inspiral")
    assert pb.bar.n == 1000
    pb.close()
