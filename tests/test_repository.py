from sokoban_engine.history import encode_history
from sokoban_engine.repository import SolutionRepository, solution_filename


def test_filenames():
    assert solution_filename(0xABC, "sol") == "0000000000000abc.sol"
    assert solution_filename(0xDEADBEEFCAFEF00D, "sav") == "deadbeefcafef00d.sav"
    assert solution_filename(0xABC, "dat") == "00000ABC.dat"
    assert solution_filename(0x1234567890, "dat") == "34567890.dat"


def test_save_and_load(tmp_path):
    repo = SolutionRepository(tmp_path / "solved")
    path = repo.save(0x1234, "uuRRRl")
    assert path.name == "0000000000001234.sol"
    assert path.read_bytes() == encode_history("uuRRRl")
    assert repo.load(0x1234) == "uuRRRl"
    assert repo.load(0x9999) is None
    # nothing but the solution file is left behind
    assert [p.name for p in (tmp_path / "solved").iterdir()] == ["0000000000001234.sol"]


def test_overwrite(tmp_path):
    repo = SolutionRepository(tmp_path)
    repo.save(1, "rrrr")
    repo.save(1, "R")
    assert repo.load(1) == "R"


def test_empty_file_means_no_solution(tmp_path):
    (tmp_path / solution_filename(7, "sol")).write_bytes(b"")
    repo = SolutionRepository(tmp_path)
    assert repo.read_blob(7) is None
    assert repo.load(7) is None


def test_corrupt_file_is_ignored(tmp_path):
    (tmp_path / solution_filename(7, "sol")).write_bytes(bytes([0x20, 0x18]))
    repo = SolutionRepository(tmp_path)
    assert repo.load(7) is None


def test_legacy_dir_fallback(tmp_path):
    current = tmp_path / "current"
    legacy = tmp_path / "legacy"
    legacy.mkdir()
    (legacy / solution_filename(5, "sol")).write_bytes(encode_history("dL"))
    repo = SolutionRepository(current, [legacy])
    assert repo.load(5) == "dL"
    repo.save(5, "L")
    assert repo.load(5) == "L"
    # writes never touch the legacy directory
    assert repo.load(5) == "L"
    assert SolutionRepository(legacy).load(5) == "dL"


def test_load_best_prefers_current_key(tmp_path):
    repo = SolutionRepository(tmp_path)
    repo.write_blob(0xAB, "dat", encode_history("uuU"))
    assert repo.load_best(0x1, 0xAB) == "uuU"
    repo.save(0x1, "R")
    assert repo.load_best(0x1, 0xAB) == "R"


def test_legacy_key_lowercase_spelling(tmp_path):
    (tmp_path / "0000abcd.dat").write_bytes(encode_history("U"))
    repo = SolutionRepository(tmp_path)
    assert repo.load(0xABCD, "dat") == "U"
